"""Level editor scene: grid size, level name and wall layout."""

from __future__ import annotations

import json
import re
import time
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import pygame

from .core import GameState, Level, Position, Wall
from .scene import GameAccessor, Scene, TextInput
from .ui import Button, InputState, Key, draw_rectangle

MINIMAL_WIDTH = 3
MINIMAL_HEIGHT = 3
MAX_LEVEL_NAME = 30

_INVALID_NAME_CHARS = frozenset('/\\:*?"<>| ')
_INTEGER = re.compile(r"[+-]?[0-9]+")
_CURSOR_BLINK_SECONDS = 0.5

_BACKGROUND = (0x10, 0x10, 0x10)
_TOP_BAR = (100, 100, 100)
_GRID = (38, 38, 48)
_WALL = (120, 120, 120)
_BORDER = (100, 100, 100)
_INVALID_BORDER = (200, 0, 0)
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)

_JSON_ESCAPES = {
    "&": "\\u0026",
    "<": "\\u003c",
    ">": "\\u003e",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class EditorField(Enum):
    """The part of the editor that receives input."""

    NONE = "none"
    GRID = "field"
    NAME = "name"
    WIDTH = "width"
    HEIGHT = "height"


def _parse_int(text: str) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    return int(text)


def _level_json(level: Level) -> str:
    payload = json.dumps(level.to_dict(), ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _JSON_ESCAPES.items():
        payload = payload.replace(char, escaped)
    return payload


def find_available_filename(directory: Union[str, Path], level_name: str) -> Path:
    """Return ``<name>.json`` in ``directory``, or the first free ``<name>_<n>.json``."""
    directory = Path(directory)
    candidate = directory / f"{level_name}.json"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{level_name}_{counter}.json"
        counter += 1
    return candidate


class CreateLevelScene(Scene):
    """Lets the player size a grid, toggle walls and save the result as a level file."""

    def __init__(self, accessor: GameAccessor, levels_dir: Union[str, Path] = "levels"):
        self.accessor = accessor
        self.levels_dir = Path(levels_dir)
        self.cursor_visible = False
        self._cursor_blink = float("-inf")
        self._layout_ui()
        self.reset()

    def _layout_ui(self) -> None:
        top_bar = float(self.accessor.config.top_bar_height)
        field_height = int(min(40.0, top_bar - 2))
        center_y = top_bar / 2
        x = 10.0

        self.reset_button = Button(x, center_y - 20, 100.0, 40, "Reset", self.reset)
        x += 100.0 + 20
        self.save_button = Button(x, center_y - 20, 100.0, 40, "Save", self.save)
        x += 100.0 + 40

        x += 80
        self.name_rect = self._field_rect(x, 200.0, field_height)
        x += 200.0 + 20

        x += 35
        self.width_rect = self._field_rect(x, 60.0, field_height)
        x += 60.0 + 20

        x += 35
        self.height_rect = self._field_rect(x, 60.0, field_height)

    @staticmethod
    def _field_rect(x: float, width: float, height: int) -> pygame.Rect:
        left = int(x)
        return pygame.Rect(left, 0, int(x + width) - left, height)

    def reset(self) -> None:
        """Restore a fresh minimal level with the default name."""
        cfg = self.accessor.config
        self.width = MINIMAL_WIDTH
        self.height = MINIMAL_HEIGHT
        self.maximal_width = cfg.screen_width // cfg.tile_size
        self.maximal_height = cfg.screen_height // cfg.tile_size

        self.level_name = TextInput("new_level", MAX_LEVEL_NAME)
        self.width_text = TextInput(str(self.width))
        self.height_text = TextInput(str(self.height))
        self.is_name_valid = True
        self.is_width_valid = True
        self.is_height_valid = True
        self.active_field = EditorField.NONE

        self.walls: set[Position] = set()
        self.next_state = GameState.LEVEL_CREATE

    def save(self) -> Optional[Path]:
        """Write the level to the levels directory; return the file written, if any."""
        logger = self.accessor.logger
        if not (self.is_name_valid and self.is_width_valid and self.is_height_valid):
            logger.warning("save aborted: invalid data in fields")
            return None

        level = Level(self.level_name.text, self.width, self.height, self.walls_list())
        payload = _level_json(level)

        try:
            self.levels_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("failed to create levels directory %s: %s", self.levels_dir, exc)
            return None

        path = find_available_filename(self.levels_dir, level.name)
        try:
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.error("failed to write level file %s: %s", path, exc)
            return None

        logger.info("level saved: name=%s w=%d h=%d", level.name, self.width, self.height)
        self.next_state = GameState.MAIN_MENU
        return path

    def walls_list(self) -> list[Wall]:
        """All placed walls, including those outside the current grid size."""
        return [Wall(cell.x, cell.y) for cell in sorted(self.walls, key=lambda p: (p.x, p.y))]

    def validate_inputs(self) -> None:
        """Check the text fields and adopt the grid size where it is valid."""
        width = _parse_int(self.width_text.text)
        if width is not None and MINIMAL_WIDTH <= width <= self.maximal_width:
            self.width = width
            self.is_width_valid = True
            self.width_text.text = str(width)
        else:
            self.is_width_valid = False

        height = _parse_int(self.height_text.text)
        if height is not None and MINIMAL_HEIGHT <= height <= self.maximal_height:
            self.height = height
            self.is_height_valid = True
            self.height_text.text = str(height)
        else:
            self.is_height_valid = False

        name = self.level_name.text
        self.is_name_valid = bool(name) and not (_INVALID_NAME_CHARS & set(name))

    def _editor(self, field: EditorField) -> Optional[TextInput]:
        return {
            EditorField.NAME: self.level_name,
            EditorField.WIDTH: self.width_text,
            EditorField.HEIGHT: self.height_text,
        }.get(field)

    def _set_active_field(self, inputs: InputState) -> None:
        if not inputs.mouse_clicked:
            return
        cfg = self.accessor.config
        x, y = inputs.cursor
        grid_bottom = cfg.top_bar_height + cfg.tile_size * self.height
        if 0 <= x < cfg.tile_size * self.width and cfg.top_bar_height <= y < grid_bottom:
            self.active_field = EditorField.GRID
        elif self.name_rect.collidepoint(x, y):
            self.active_field = EditorField.NAME
        elif self.height_rect.collidepoint(x, y):
            self.active_field = EditorField.HEIGHT
        elif self.width_rect.collidepoint(x, y):
            self.active_field = EditorField.WIDTH
        else:
            self.active_field = EditorField.NONE

    def handle_input(self, inputs: InputState) -> None:
        """Apply clicks, typed text and backspace to the active field."""
        self._set_active_field(inputs)
        field = self.active_field
        editor = self._editor(field)
        if field is EditorField.GRID:
            if inputs.mouse_clicked:
                tile = self.accessor.config.tile_size
                x, y = inputs.cursor
                cell = Position(x // tile, y // tile)
                if cell.x < self.width and cell.y < self.height:
                    self.walls ^= {cell}
        elif editor is not None:
            editor.append(inputs.text)

        if Key.BACKSPACE in inputs.keys and editor is not None:
            editor.backspace()
        self.validate_inputs()

    def update(self, inputs: InputState) -> GameState:
        self.accessor.logger.debug(
            "updating create scene: field=%s name_valid=%s w_valid=%s h_valid=%s",
            self.active_field.value,
            self.is_name_valid,
            self.is_width_valid,
            self.is_height_valid,
        )
        self.handle_input(inputs)
        self.save_button.update(inputs)
        self.reset_button.update(inputs)

        now = time.monotonic()
        if now - self._cursor_blink > _CURSOR_BLINK_SECONDS:
            self.cursor_visible = not self.cursor_visible
            self._cursor_blink = now
        return self.next_state

    def draw(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        assets = self.accessor.assets
        font = assets.ui_font
        tile = cfg.tile_size

        screen.fill(_BACKGROUND)
        draw_rectangle(screen, 0, 0, cfg.screen_width, cfg.top_bar_height, _TOP_BAR)
        self.reset_button.draw(screen, assets)
        self.save_button.draw(screen, assets)

        label_y = self.name_rect.top + 28 - font.get_ascent()
        screen.blit(font.render("Name:", True, _WHITE), (self.name_rect.left - 80, label_y))
        self._draw_input_field(
            screen, self.level_name.text, self.name_rect, EditorField.NAME, self.is_name_valid
        )
        screen.blit(font.render("W:", True, _WHITE), (self.width_rect.left - 35, label_y))
        self._draw_input_field(
            screen, self.width_text.text, self.width_rect, EditorField.WIDTH, self.is_width_valid
        )
        screen.blit(font.render("H:", True, _WHITE), (self.height_rect.left - 35, label_y))
        self._draw_input_field(
            screen,
            self.height_text.text,
            self.height_rect,
            EditorField.HEIGHT,
            self.is_height_valid,
        )

        top = cfg.top_bar_height
        draw_rectangle(screen, 0, top, self.width * tile, self.height * tile, _GRID)
        for cell in self.walls:
            if cell.x < self.width and cell.y < self.height:
                draw_rectangle(screen, cell.x * tile, top + cell.y * tile, tile, tile, _WALL)

    def _draw_input_field(
        self,
        screen: pygame.Surface,
        content: str,
        rect: pygame.Rect,
        field: EditorField,
        is_valid: bool,
    ) -> None:
        font = self.accessor.assets.ui_font
        border = _BORDER if is_valid else _INVALID_BORDER
        draw_rectangle(screen, rect.left - 2, rect.top - 2, rect.width + 4, rect.height + 4, border)
        draw_rectangle(screen, rect.left, rect.top, rect.width, rect.height, _BLACK)
        text_y = rect.top + 28 - font.get_ascent()
        screen.blit(font.render(content, True, _WHITE), (rect.left + 5, text_y))

        if self.active_field is field and self.cursor_visible:
            cursor_x = rect.left + 5 + font.size(content)[0] + 2
            draw_rectangle(screen, cursor_x, rect.top + 8, 2, rect.height - 16, _WHITE)

    def on_enter(self) -> None:
        self.reset()