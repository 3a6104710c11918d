"""Main menu: level selection and navigation to the other scenes."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterator, Union

import pygame

from .core import GameState, Level
from .scene import GameAccessor, Scene
from .ui import Button, InputState, Key, draw_rectangle

_BACKGROUND = (20, 20, 40)
_FIELD_BORDER = (128, 128, 128)
_BLACK = (0, 0, 0)
_WHITE = (255, 255, 255)

_BUTTON_WIDTH = 240.0
_BUTTON_HEIGHT = 50.0
_BUTTON_SPACING = _BUTTON_HEIGHT + 10
_LEVEL_SUFFIX = ".json"


def _json_files(directory: Path) -> Iterator[str]:
    """Names of level files below ``directory``, walked in lexical order."""
    for entry in sorted(directory.iterdir(), key=lambda path: path.name):
        if entry.is_dir():
            yield from _json_files(entry)
        elif entry.name.endswith(_LEVEL_SUFFIX):
            yield entry.name


class MainMenuScene(Scene):
    """Lists the available levels and offers new game, editor, ranking and quit."""

    def __init__(self, accessor: GameAccessor, levels_dir: Union[str, Path] = "levels"):
        self.accessor = accessor
        self.levels_dir = Path(levels_dir)
        self.level_names: list[str] = []
        self.current_level = 0
        self.next_state = GameState.MAIN_MENU

        cfg = accessor.config
        left = cfg.screen_width / 2 - 120
        start_y = float(cfg.screen_height // 2) + 80

        self.new_game_button = Button(
            left, start_y, _BUTTON_WIDTH, _BUTTON_HEIGHT, "NEW GAME", self.new_game
        )
        self.create_level_button = Button(
            left,
            start_y + _BUTTON_SPACING,
            _BUTTON_WIDTH,
            _BUTTON_HEIGHT,
            "CREATE LEVEL",
            self.create_level,
        )
        self.ranking_button = Button(
            left,
            start_y + 2 * _BUTTON_SPACING,
            _BUTTON_WIDTH,
            _BUTTON_HEIGHT,
            "RANKING",
            self.ranking,
        )
        self.quit_button = Button(
            left, start_y + 3 * _BUTTON_SPACING, _BUTTON_WIDTH, _BUTTON_HEIGHT, "QUIT", self.quit
        )

    @property
    def buttons(self) -> tuple[Button, ...]:
        return (
            self.new_game_button,
            self.create_level_button,
            self.ranking_button,
            self.quit_button,
        )

    def new_game(self) -> None:
        """Load the selected level and start playing it."""
        logger = self.accessor.logger
        if not self.level_names:
            logger.warning("no levels were found")
            return

        path = self.levels_dir / self.level_names[self.current_level]
        logger.info("loading level %s", path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.error("failed to read level file %s: %s", path, exc)
            return

        try:
            level = Level.from_dict(json.loads(data))
        except ValueError as exc:
            logger.error("failed to parse level json %s: %s", path, exc)
            return

        cfg = self.accessor.config
        max_width = cfg.screen_width // cfg.tile_size
        max_height = cfg.screen_height // cfg.tile_size
        if level.grid_height > max_height or level.grid_width > max_width:
            logger.warning(
                "unappropriated level size: grid %dx%d, at most %dx%d",
                level.grid_width,
                level.grid_height,
                max_width,
                max_height,
            )
            return

        self.next_state = GameState.PLAYING
        self.accessor.start_game(level)

    def create_level(self) -> None:
        """Switch to the level editor."""
        self.accessor.logger.info("go to level editor")
        self.next_state = GameState.LEVEL_CREATE

    def ranking(self) -> None:
        """Switch to the best scores table."""
        self.accessor.logger.info("go to ranking")
        self.next_state = GameState.BEST_SCORES

    def quit(self) -> None:
        """Leave the program with a success status."""
        self.accessor.logger.info("quit requested from main menu")
        sys.exit(0)

    def update(self, inputs: InputState) -> GameState:
        for button in self.buttons:
            button.update(inputs)
        self._handle_input(inputs)
        return self.next_state

    def _handle_input(self, inputs: InputState) -> None:
        if not self.level_names:
            return
        if Key.UP in inputs.keys:
            self.current_level = (self.current_level - 1) % len(self.level_names)
        elif Key.DOWN in inputs.keys:
            self.current_level = (self.current_level + 1) % len(self.level_names)
        elif Key.ENTER in inputs.keys:
            self.new_game()

    @property
    def selected_level_label(self) -> str:
        """Text shown in the level selector."""
        if not self.level_names:
            return "Levels not found"
        name = self.level_names[self.current_level]
        return name[: -len(_LEVEL_SUFFIX)] if name.endswith(_LEVEL_SUFFIX) else name

    def draw(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        assets = self.accessor.assets
        center_x = cfg.screen_width // 2

        screen.fill(_BACKGROUND)

        title_font = assets.title_font
        title = title_font.render("SNAKE GAME", True, _WHITE)
        screen.blit(
            title, (center_x - title.get_width() // 2, 50 - title_font.get_ascent())
        )

        self._draw_level_selector(screen)
        for button in self.buttons:
            button.draw(screen, assets)

    def _draw_level_selector(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        font = self.accessor.assets.ui_font
        center_x = cfg.screen_width // 2

        label = font.render("Select level:", True, _WHITE)
        label_x = center_x - label.get_width() // 2 - 60
        label_y = float(cfg.screen_height // 2) - 80
        screen.blit(label, (label_x, int(label_y) - font.get_ascent()))

        field_width = 240.0
        field_height = 40.0
        field_x = float(label_x) + label.get_width() + 10
        field_y = label_y - field_height / 2 - 5

        draw_rectangle(
            screen, field_x - 2, field_y - 2, field_width + 4, field_height + 4, _FIELD_BORDER
        )
        draw_rectangle(screen, field_x, field_y, field_width, field_height, _BLACK)

        name = font.render(self.selected_level_label, True, _WHITE)
        text_x = field_x + (field_width - name.get_width()) / 2
        text_y = field_y + (field_height - name.get_height()) / 2
        screen.blit(name, (int(text_x), int(text_y)))

    def on_enter(self) -> None:
        logger = self.accessor.logger
        logger.info("entering main menu, scanning for levels")
        self.level_names = []
        self.current_level = 0

        try:
            self.levels_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("failed to create levels directory: %s", exc)
            return

        try:
            for name in _json_files(self.levels_dir):
                self.level_names.append(name)
        except OSError as exc:
            logger.error("failed to scan for levels: %s", exc)

        self.next_state = GameState.MAIN_MENU