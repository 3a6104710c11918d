"""Scene shown after the snake dies: result, name entry and score saving."""

from __future__ import annotations

from datetime import datetime, timezone

import pygame

from .core import GameState, Level
from .scene import GameAccessor, Scene, TextInput, format_game_time
from .storage import Record
from .ui import Button, InputState, Key, draw_rectangle

MAX_PLAYER_NAME = 13

_OVERLAY = (0, 0, 0, 168)
_BORDER = (100, 100, 100)
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)


class GameOverScene(Scene):
    """Shows the final score and lets the player save it or leave."""

    def __init__(self, accessor: GameAccessor, level: Level):
        self.accessor = accessor
        self.level = level
        self.next_state = GameState.GAME_OVER
        self.is_record_saved = False
        self.player_name = TextInput("", MAX_PLAYER_NAME)

        cfg = accessor.config
        center_x = cfg.screen_width / 2
        middle_y = float(cfg.screen_height // 2)

        self.new_game_button = Button(
            center_x - 120, middle_y + 90, 240, 50, "NEW GAME", self._start_new_game
        )
        self.main_menu_button = Button(
            center_x - 120, middle_y + 145, 240, 50, "MAIN MENU", self._go_to_main_menu
        )
        self.save_score_button = Button(
            center_x + 130, middle_y + 38, 40, 40, "S", self.save_score
        )

        left = int(center_x - 120)
        top = int(middle_y + 38)
        self.name_rect = pygame.Rect(
            left, top, int(center_x - 120 + 240.0) - left, int(middle_y + 38 + 40.0) - top
        )

    def _start_new_game(self) -> None:
        self.accessor.start_game(self.level)
        self.next_state = GameState.PLAYING

    def _go_to_main_menu(self) -> None:
        self.next_state = GameState.MAIN_MENU

    def save_score(self) -> None:
        """Store the result once; a failed save may be retried."""
        if self.is_record_saved:
            return
        repository = self.accessor.repository
        if repository is None:
            self.accessor.logger.warning("no record store available, score not saved")
            return
        record = Record(
            player_name=self.player_name.text,
            score=self.accessor.score,
            time=self.accessor.game_time,
            level_name=self.level.name,
            created_at=datetime.now(timezone.utc),
        )
        try:
            repository.save_record(record)
        except Exception as exc:  # a storage failure is reported, never fatal to the game
            self.accessor.logger.error("failed to save record: %s", exc)
            return
        self.is_record_saved = True

    def _handle_input(self, inputs: InputState) -> None:
        self.player_name.append(inputs.text)
        if Key.BACKSPACE in inputs.keys:
            self.player_name.backspace()

    def update(self, inputs: InputState) -> GameState:
        self._handle_input(inputs)
        self.new_game_button.update(inputs)
        self.main_menu_button.update(inputs)
        self.save_score_button.update(inputs)
        return self.next_state

    def draw(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        assets = self.accessor.assets
        font = assets.ui_font

        draw_rectangle(screen, 0, 0, cfg.screen_width, cfg.screen_height, _OVERLAY)

        center_x = cfg.screen_width // 2
        game_over_y = cfg.window_height() // 2 - 80
        score_y = game_over_y + 40
        time_y = score_y + 25
        seconds = self.accessor.game_time.total_seconds()

        self._blit_centered(screen, "GAME OVER", center_x, game_over_y)
        self._blit_centered(screen, f"FINAL SCORE: {self.accessor.score}", center_x, score_y)
        self._blit_centered(screen, f"TIME: {format_game_time(seconds)}", center_x, time_y)

        self._draw_input_field(screen)

        self.new_game_button.draw(screen, assets)
        self.main_menu_button.draw(screen, assets)
        self.save_score_button.draw(screen, assets)

    def _blit_centered(self, screen: pygame.Surface, text: str, center_x: int, baseline: int) -> None:
        font = self.accessor.assets.ui_font
        label = font.render(text, True, _WHITE)
        screen.blit(label, (center_x - label.get_width() // 2, baseline - font.get_ascent()))

    def _draw_input_field(self, screen: pygame.Surface) -> None:
        font = self.accessor.assets.ui_font
        rect = self.name_rect
        draw_rectangle(screen, rect.left - 2, rect.top - 2, rect.width + 4, rect.height + 4, _BORDER)
        draw_rectangle(screen, rect.left, rect.top, rect.width, rect.height, _BLACK)
        text_y = rect.top + 28 - font.get_ascent()
        screen.blit(font.render(self.player_name.text, True, _WHITE), (rect.left + 15, text_y))

    def on_enter(self) -> None:
        self.next_state = GameState.GAME_OVER
        self.is_record_saved = False