"""Best scores table with filtering by player and level."""

from __future__ import annotations

import time
from datetime import timedelta
from enum import Enum
from typing import Optional

import pygame

from .core import GameState
from .create_level_scene import MAX_LEVEL_NAME
from .game_over_scene import MAX_PLAYER_NAME
from .scene import GameAccessor, Scene, TextInput
from .storage import Filter, Record
from .ui import Button, InputState, Key, draw_rectangle

RECORDS_NUMBER = 20

_CURSOR_BLINK_SECONDS = 0.5

_BACKGROUND = (0x0A, 0x19, 0x4E)
_ERROR = (255, 100, 100)
_MUTED = (180, 180, 180)
_BORDER = (100, 100, 100)
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)

_FIELDS_Y = 120
_FIELD_WIDTH = 300
_FIELD_HEIGHT = 40
_PLAYER_FIELD_X = 40

_HEADER_Y = 220
_COL_NUM = 40
_COL_PLAYER = 90
_COL_SCORE = 300
_COL_TIME = 410
_COL_LEVEL = 510
_COL_DATE = 710
_ROW_HEIGHT = 30

_SORT_BUTTON_SIZE = 25.0
_SORT_BUTTON_Y = 195.0


class RankingField(Enum):
    """The filter field receiving typed text."""

    NONE = "none"
    PLAYER = "player"
    LEVEL = "level"


def _record_time(duration: timedelta) -> str:
    total = int(duration.total_seconds())
    return f"{(total // 60) % 60:02d}:{total % 60:02d}"


class RankingScene(Scene):
    """Shows the top records, filterable by player prefix and level name."""

    def __init__(self, accessor: GameAccessor):
        self.accessor = accessor
        self.cursor_visible = False
        self._cursor_blink = float("-inf")

        self.player_rect = pygame.Rect(_PLAYER_FIELD_X, _FIELDS_Y, _FIELD_WIDTH, _FIELD_HEIGHT)
        level_x = _PLAYER_FIELD_X + _FIELD_WIDTH + 20
        self.level_rect = pygame.Rect(level_x, _FIELDS_Y, _FIELD_WIDTH, _FIELD_HEIGHT)

        font = accessor.assets.ui_font
        score_width = font.size("SCORE")[0]
        time_width = font.size("TIME")[0]
        self.score_button = Button(
            float(_COL_SCORE + score_width + 5),
            _SORT_BUTTON_Y,
            _SORT_BUTTON_SIZE,
            _SORT_BUTTON_SIZE,
            "F",
            self._toggle_score_order,
        )
        self.time_button = Button(
            float(_COL_TIME + time_width + 5),
            _SORT_BUTTON_Y,
            _SORT_BUTTON_SIZE,
            _SORT_BUTTON_SIZE,
            "F",
            self._toggle_time_order,
        )

        self.reset()
        self.load_records()

    def _toggle_score_order(self) -> None:
        self.is_score_asc = not self.is_score_asc
        self.load_records()

    def _toggle_time_order(self) -> None:
        self.is_time_asc = not self.is_time_asc
        self.load_records()

    def reset(self) -> None:
        """Clear filters and records and restore the default ordering."""
        self.is_score_asc = False
        self.is_time_asc = True
        self.load_error: Optional[Exception] = None
        self.records: list[Record] = []
        self.level_name = TextInput("", MAX_LEVEL_NAME)
        self.player_name = TextInput("", MAX_PLAYER_NAME)
        self.active_field = RankingField.NONE

    @property
    def filter(self) -> Filter:
        """The query the table currently shows."""
        return Filter(
            player_name_prefix=self.player_name.text,
            level_name=self.level_name.text,
            is_score_asc=self.is_score_asc,
            is_time_asc=self.is_time_asc,
            players_max_number=RECORDS_NUMBER,
        )

    def load_records(self) -> None:
        """Fetch the records matching the current filter; remember a failure."""
        repository = self.accessor.repository
        if repository is None:
            self.accessor.logger.warning("no record store available")
            self.records = []
            self.load_error = RuntimeError("no record store available")
            return
        try:
            self.records = repository.get_top_records(self.filter)
        except Exception as exc:  # shown to the player instead of ending the game
            self.accessor.logger.error("failed to load records: %s", exc)
            self.records = []
            self.load_error = exc
        else:
            self.load_error = None

    def _set_active_field(self, inputs: InputState) -> None:
        if not inputs.mouse_clicked:
            return
        x, y = inputs.cursor
        if self.level_rect.collidepoint(x, y):
            self.active_field = RankingField.LEVEL
        elif self.player_rect.collidepoint(x, y):
            self.active_field = RankingField.PLAYER
        else:
            self.active_field = RankingField.NONE

    def _editor(self) -> Optional[TextInput]:
        if self.active_field is RankingField.LEVEL:
            return self.level_name
        if self.active_field is RankingField.PLAYER:
            return self.player_name
        return None

    def update(self, inputs: InputState) -> GameState:
        self.accessor.logger.debug("updating ranking, player filter %r", self.player_name.text)
        self._set_active_field(inputs)
        editor = self._editor()
        if editor is not None:
            if editor.append(inputs.text):
                self.load_records()
            if Key.BACKSPACE in inputs.keys and editor.backspace():
                self.load_records()

        now = time.monotonic()
        if now - self._cursor_blink > _CURSOR_BLINK_SECONDS:
            self.cursor_visible = not self.cursor_visible
            self._cursor_blink = now

        if Key.ESCAPE in inputs.keys:
            return GameState.MAIN_MENU

        self.score_button.update(inputs)
        self.time_button.update(inputs)
        return GameState.BEST_SCORES

    def _blit(self, screen: pygame.Surface, text: str, x: int, baseline: int, color) -> None:
        font = self.accessor.assets.ui_font
        screen.blit(font.render(text, True, color), (x, baseline - font.get_ascent()))

    def _blit_centered(self, screen: pygame.Surface, text: str, baseline: int, color) -> None:
        width = self.accessor.config.screen_width
        text_width = self.accessor.assets.ui_font.size(text)[0]
        self._blit(screen, text, (width - text_width) // 2, baseline, color)

    def draw(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        assets = self.accessor.assets

        screen.fill(_BACKGROUND)

        title_font = assets.title_font
        title = title_font.render("TOP SCORES", True, _WHITE)
        screen.blit(
            title, ((cfg.screen_width - title.get_width()) // 2, 60 - title_font.get_ascent())
        )

        if self.load_error is not None:
            self._blit_centered(
                screen, "Error: Could not load records.", cfg.screen_height // 2, _ERROR
            )
            return

        self._blit(screen, "Player Name:", self.player_rect.left, self.player_rect.top - 10, _WHITE)
        self._blit(screen, "Level Name:", self.level_rect.left, self.level_rect.top - 10, _WHITE)
        self._draw_input_field(screen, self.player_name.text, self.player_rect, RankingField.PLAYER)
        self._draw_input_field(screen, self.level_name.text, self.level_rect, RankingField.LEVEL)

        headers = (
            ("№", _COL_NUM),
            ("PLAYER", _COL_PLAYER),
            ("SCORE", _COL_SCORE),
            ("TIME", _COL_TIME),
            ("LEVEL", _COL_LEVEL),
            ("DATE", _COL_DATE),
        )
        for text, column in headers:
            self._blit(screen, text, column, _HEADER_Y, _WHITE)

        self.score_button.draw(screen, assets)
        self.time_button.draw(screen, assets)

        if not self.records:
            self._blit_centered(screen, "No records yet. Be the first!", _HEADER_Y + 60, _MUTED)
        else:
            for number, record in enumerate(self.records, start=1):
                row_y = _HEADER_Y + number * _ROW_HEIGHT
                cells = (
                    (f"{number}.", _COL_NUM),
                    (record.player_name, _COL_PLAYER),
                    (str(record.score), _COL_SCORE),
                    (_record_time(record.time), _COL_TIME),
                    (record.level_name, _COL_LEVEL),
                    (record.created_at.strftime("%Y-%m-%d"), _COL_DATE),
                )
                for text, column in cells:
                    self._blit(screen, text, column, row_y, _WHITE)

        self._blit_centered(screen, "Press ESC to return to menu", cfg.screen_height - 40, _WHITE)

    def _draw_input_field(
        self, screen: pygame.Surface, content: str, rect: pygame.Rect, field: RankingField
    ) -> None:
        font = self.accessor.assets.ui_font
        draw_rectangle(screen, rect.left - 2, rect.top - 2, rect.width + 4, rect.height + 4, _BORDER)
        draw_rectangle(screen, rect.left, rect.top, rect.width, rect.height, _BLACK)
        self._blit(screen, content, rect.left + 5, rect.top + 28, _WHITE)

        if self.active_field is field and self.cursor_visible:
            cursor_x = rect.left + 5 + font.size(content)[0] + 2
            draw_rectangle(screen, cursor_x, rect.top + 8, 2, rect.height - 16, _WHITE)

    def on_enter(self) -> None:
        self.accessor.logger.info("entering ranking scene")
        self.reset()
        self.load_records()