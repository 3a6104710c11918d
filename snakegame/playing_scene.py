"""The scene in which the snake is played."""

from __future__ import annotations

import math
import random
from typing import Optional

import pygame

from .core import (
    Direction,
    Food,
    GameState,
    Level,
    Position,
    Snake,
    corner_to_rotation_angle,
    direction_to_rotation_angle,
    get_direction,
)
from .scene import GameAccessor, Scene, format_game_time
from .ui import InputState, Key, draw_rectangle

_BACKGROUND = (5, 5, 15)
_FIELD = (0x10, 0x10, 0x10)
_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)
_TEXT_BASELINE = 25

_TURN_KEYS = (
    (Key.UP, Direction.UP),
    (Key.DOWN, Direction.DOWN),
    (Key.LEFT, Direction.LEFT),
    (Key.RIGHT, Direction.RIGHT),
)


class PlayingScene(Scene):
    """Moves the snake, places food and detects crashes on one level."""

    def __init__(
        self, accessor: GameAccessor, level: Level, rng: Optional[random.Random] = None
    ):
        self.accessor = accessor
        self.level = level
        self.walls = list(level.walls)
        self.food: Optional[Food] = None
        self.snake: Snake
        self._rng = rng if rng is not None else random.Random()
        self.reset()

    def reset(self) -> None:
        """Place a fresh snake in the middle of the level and spawn food."""
        logger = self.accessor.logger
        logger.info("playing scene resetting")
        cfg = self.accessor.config
        try:
            snake = Snake(
                self.level.grid_width // 2,
                self.level.grid_height // 2,
                cfg.initial_snake_len,
                cfg.initial_speed,
                cfg.max_speed,
            )
        except ValueError as exc:
            logger.error("failed to create snake during reset: %s", exc)
            raise
        self.snake = snake
        self.spawn_food()

    def spawn_food(self) -> None:
        """Put food on a random cell free of walls and snake; keep the old food if none is free."""
        occupied = {wall.position for wall in self.walls}
        occupied.update(self.snake.body)
        free = [
            Position(x, y)
            for x in range(self.level.grid_width)
            for y in range(self.level.grid_height)
            if Position(x, y) not in occupied
        ]
        if not free:
            self.accessor.logger.warning("failed to create food: no free space left")
            return
        cell = free[self._rng.randrange(len(free))]
        self.food = Food(cell.x, cell.y)
        self.accessor.logger.info("new food created at (%d, %d)", cell.x, cell.y)

    def update(self, inputs: InputState) -> GameState:
        if not self.snake.is_alive:
            return GameState.GAME_OVER
        self._handle_input(inputs)
        if self.snake.update():
            return self.check_collisions()
        return GameState.PLAYING

    def _handle_input(self, inputs: InputState) -> None:
        for key, direction in _TURN_KEYS:
            if key in inputs.keys:
                self.snake.set_next_direction(direction)
                return
        if Key.R in inputs.keys:
            try:
                self.reset()
            except ValueError as exc:
                self.accessor.logger.error("failed to reset game: %s", exc)
                return
            self.accessor.reset()

    def check_collisions(self) -> GameState:
        """Resolve the snake's new head position: walls, borders, food and its own body."""
        logger = self.accessor.logger
        snake = self.snake
        head = snake.head

        if any(wall.position == head for wall in self.walls):
            snake.is_alive = False
            logger.info("snake crashed in wall")
        if not 0 <= head.x < self.level.grid_width:
            snake.is_alive = False
            logger.info("snake crashed in border")
        if not 0 <= head.y < self.level.grid_height:
            snake.is_alive = False
            logger.info("snake crashed in border")

        if self.food is not None and self.food.position == head:
            logger.info("snake ate food")
            if self.accessor.notify_food_eaten():
                snake.decrease_move_interval(self.accessor.config.speed_increase_amount)
                logger.info("change snake speed")
            self.spawn_food()
        else:
            snake.cut_tail()

        snake.check_collisions_with_self()
        if not snake.is_alive:
            logger.info("snake is dead")
            return GameState.GAME_OVER
        return GameState.PLAYING

    def draw(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        font = self.accessor.assets.ui_font
        tile = cfg.tile_size
        top = cfg.top_bar_height

        screen.fill(_BACKGROUND)
        draw_rectangle(
            screen, 0, top, self.level.grid_width * tile, self.level.grid_height * tile, _FIELD
        )
        draw_rectangle(screen, 0, 0, cfg.screen_width, top, _WHITE)

        text_y = _TEXT_BASELINE - font.get_ascent()
        score_text = f"SCORE: {self.accessor.score}"
        time_text = f"TIME: {format_game_time(self.accessor.game_time.total_seconds())}"
        screen.blit(font.render(score_text, True, _BLACK), (10, text_y))
        screen.blit(font.render(time_text, True, _BLACK), (cfg.screen_width - 200, text_y))

        if self.snake.is_alive:
            self._draw_snake(screen)
        self._draw_food(screen)
        self._draw_walls(screen)

    def _segment_sprite(self, index: int) -> tuple[pygame.Surface, float]:
        assets = self.accessor.assets
        body = self.snake.body
        if index == 0:
            return assets.snake_head, direction_to_rotation_angle(self.snake.direction)
        segment = body[index]
        new_direction = get_direction(body[index - 1], segment)
        if index == len(body) - 1:
            return assets.snake_tail, direction_to_rotation_angle(new_direction)
        old_direction = get_direction(segment, body[index + 1])
        if new_direction is old_direction:
            return assets.snake_body, direction_to_rotation_angle(old_direction)
        return assets.snake_body_corner, corner_to_rotation_angle(old_direction, new_direction)

    def _draw_snake(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        tile = cfg.tile_size
        for index, segment in enumerate(self.snake.body):
            image, rotation = self._segment_sprite(index)
            if image.get_width() == 0 or image.get_height() == 0:
                continue
            sprite = pygame.transform.scale(image, (tile, tile))
            sprite = pygame.transform.rotate(sprite, round(-math.degrees(rotation), 6))
            center = (
                round(segment.x * tile + tile / 2),
                round(segment.y * tile + tile / 2 + cfg.top_bar_height),
            )
            screen.blit(sprite, sprite.get_rect(center=center))

    def _draw_food(self, screen: pygame.Surface) -> None:
        if self.food is None:
            return
        cfg = self.accessor.config
        position = (
            self.food.x * cfg.tile_size,
            self.food.y * cfg.tile_size + cfg.top_bar_height,
        )
        screen.blit(self.accessor.assets.apple, position)

    def _draw_walls(self, screen: pygame.Surface) -> None:
        cfg = self.accessor.config
        image = self.accessor.assets.wall
        if image.get_width() == 0 or image.get_height() == 0:
            return
        sprite = pygame.transform.scale(image, (cfg.tile_size, cfg.tile_size))
        for wall in self.walls:
            screen.blit(
                sprite,
                (wall.x * cfg.tile_size, wall.y * cfg.tile_size + cfg.top_bar_height),
            )

    def on_enter(self) -> None:
        self.accessor.logger.info("entering playing scene, level %s", self.level.name)