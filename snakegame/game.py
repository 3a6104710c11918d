"""The running game: shared state, scene switching and the game clock."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

import pygame

from .config import Config
from .core import GameState, Level
from .create_level_scene import CreateLevelScene
from .game_over_scene import GameOverScene
from .main_menu_scene import MainMenuScene
from .playing_scene import PlayingScene
from .ranking_scene import RankingScene
from .scene import Scene
from .storage import Repository
from .ui import InputState

if TYPE_CHECKING:
    from .assets import Assets

DEFAULT_TICKS_PER_SECOND = 60


class Game:
    """Owns the scenes, the score and the play time, and routes ticks to the current scene."""

    def __init__(
        self,
        cfg: Config,
        assets: "Assets",
        repo: Optional[Repository] = None,
        ticks_per_second: int = DEFAULT_TICKS_PER_SECOND,
    ):
        if ticks_per_second <= 0:
            raise ValueError(f"ticks per second must be positive, received {ticks_per_second}")
        self._cfg = cfg
        self._assets = assets
        self._logger = cfg.logger if cfg.logger is not None else logging.getLogger("snakegame")
        self._repo = repo
        self._tick = timedelta(seconds=1) / ticks_per_second
        self._score = 0
        self._game_time = timedelta(0)

        main_menu = MainMenuScene(self)
        self.scenes: dict[GameState, Scene] = {
            GameState.MAIN_MENU: main_menu,
            GameState.LEVEL_CREATE: CreateLevelScene(self),
            GameState.BEST_SCORES: RankingScene(self),
        }
        self.current_scene: Scene = main_menu
        self.current_scene.on_enter()

        self.reset()
        self._logger.info(
            "game created successfully: screen_width=%d screen_height=%d tile_size=%d "
            "initial_snake_len=%d initial_speed=%d",
            cfg.screen_width,
            cfg.screen_height,
            cfg.tile_size,
            cfg.initial_snake_len,
            cfg.initial_speed,
        )

    @property
    def config(self) -> Config:
        return self._cfg

    @property
    def assets(self) -> "Assets":
        return self._assets

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def repository(self) -> Optional[Repository]:
        return self._repo

    @property
    def score(self) -> int:
        return self._score

    @property
    def game_time(self) -> timedelta:
        return self._game_time

    def reset(self) -> None:
        """Zero the score and the play time."""
        self._score = 0
        self._game_time = timedelta(0)

    def start_game(self, level: Level) -> None:
        """Switch to a fresh playing scene on ``level``; stay put if it cannot be built."""
        self._logger.info("start game command received, level %s", level.name)
        try:
            playing = PlayingScene(self, level)
        except ValueError as exc:
            self._logger.error("failed to start level %s: %s", level.name, exc)
            return

        self.reset()
        playing.on_enter()
        self.scenes[GameState.PLAYING] = playing
        self.current_scene = playing
        self.scenes[GameState.GAME_OVER] = GameOverScene(self, level)
        self._logger.info("switched to playing scene")

    def update(self, inputs: InputState) -> None:
        """Advance the current scene one tick and switch scenes when it asks to."""
        state = self.current_scene.update(inputs)
        target = self.scenes.get(state)
        if target is not self.current_scene:
            if target is None:
                raise ValueError(f"unknown game state: {state!r}")
            self._logger.info("changing scene to %s", state.name)
            self.current_scene = target
            self.current_scene.on_enter()

        if isinstance(self.current_scene, PlayingScene):
            self._game_time += self._tick

    def draw(self, screen: pygame.Surface) -> None:
        """Render the current scene."""
        self.current_scene.draw(screen)

    def notify_food_eaten(self) -> bool:
        """Count one eaten piece of food; return True when the snake should speed up."""
        self._score += 1
        self._logger.info("snake ate food, new score %d", self._score)
        interval = self._cfg.speed_increase_interval
        if interval > 0 and self._score % interval == 0:
            self._logger.info("speed increase condition met")
            return True
        return False

    def layout(self, outside_width: int, outside_height: int) -> tuple[int, int]:
        """Logical screen size, independent of the window size."""
        return self._cfg.screen_width, self._cfg.window_height()