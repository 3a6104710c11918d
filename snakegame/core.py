"""Core game model: positions, directions, levels and the snake."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping


class GameState(IntEnum):
    """The scene the game is currently in."""

    MAIN_MENU = 0
    PLAYING = 1
    GAME_OVER = 2
    LEVEL_CREATE = 3
    BEST_SCORES = 4


class Direction(Enum):
    """Movement direction on the grid."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_STEPS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Position:
    """A cell on the grid."""

    x: int
    y: int


@dataclass(frozen=True)
class Food:
    """A piece of food lying on the grid."""

    x: int
    y: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class Wall:
    """A wall cell."""

    x: int
    y: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


def get_direction(first: Position, second: Position) -> Direction:
    """Direction pointing from ``second`` towards ``first`` as seen by the renderer."""
    if first.x == second.x:
        return Direction.UP if first.y < second.y else Direction.DOWN
    return Direction.LEFT if first.x < second.x else Direction.RIGHT


def direction_to_rotation_angle(direction: Direction) -> float:
    """Rotation in radians for a sprite facing ``direction``."""
    return {
        Direction.RIGHT: 0.0,
        Direction.LEFT: math.pi,
        Direction.UP: 3 * math.pi / 2,
        Direction.DOWN: math.pi / 2,
    }[direction]


def corner_to_rotation_angle(old_direction: Direction, new_direction: Direction) -> float:
    """Rotation in radians for a corner sprite joining two directions."""
    if old_direction is Direction.RIGHT:
        return 0.0 if new_direction is Direction.UP else 3 * math.pi / 2
    if old_direction is Direction.LEFT:
        return math.pi / 2 if new_direction is Direction.UP else math.pi
    if old_direction is Direction.UP:
        return 3 * math.pi / 2 if new_direction is Direction.LEFT else math.pi
    return 0.0 if new_direction is Direction.LEFT else math.pi / 2


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    if key in data:
        return data[key]
    lowered = key.lower()
    for name, value in data.items():
        if isinstance(name, str) and name.lower() == lowered:
            return value
    return None


def _as_int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {name!r} must be an integer, got {value!r}")
    return value


@dataclass
class Level:
    """A level: grid size and wall layout."""

    name: str
    grid_width: int
    grid_height: int
    walls: list[Wall] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialisable form of the level, as stored in level files."""
        return {
            "name": self.name,
            "grid_width": self.grid_width,
            "grid_height": self.grid_height,
            "walls": [{"X": wall.x, "Y": wall.y} for wall in self.walls],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Level":
        """Build a level from its serialised form; missing fields take zero values."""
        if not isinstance(data, Mapping):
            raise ValueError("level data must be an object")
        name = _lookup(data, "name")
        if name is None:
            name = ""
        elif not isinstance(name, str):
            raise ValueError(f"field 'name' must be a string, got {name!r}")
        raw_walls = _lookup(data, "walls")
        if raw_walls is None:
            raw_walls = []
        if not isinstance(raw_walls, list):
            raise ValueError("field 'walls' must be a list")
        walls = []
        for raw in raw_walls:
            if not isinstance(raw, Mapping):
                raise ValueError("each wall must be an object")
            walls.append(Wall(_as_int(_lookup(raw, "X"), "X"), _as_int(_lookup(raw, "Y"), "Y")))
        return cls(
            name=name,
            grid_width=_as_int(_lookup(data, "grid_width"), "grid_width"),
            grid_height=_as_int(_lookup(data, "grid_height"), "grid_height"),
            walls=walls,
        )


class Snake:
    """The player's snake: body cells from head to tail, heading and pace."""

    def __init__(self, x: int, y: int, length: int, move_interval: int, min_move_interval: int):
        if length < 2:
            raise ValueError(f"invalid snake size: expected greater than 1, received {length}")
        if move_interval <= 0:
            raise ValueError(
                f"invalid move interval: expected positive value, received {move_interval}"
            )
        self.body: list[Position] = [Position(x - i, y) for i in range(length)]
        self.direction = Direction.RIGHT
        self.next_direction = Direction.RIGHT
        self.is_alive = True
        self._min_move_interval = min_move_interval
        self._move_interval = move_interval
        self._move_timer = 0

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def move_interval(self) -> int:
        """Ticks between two moves."""
        return self._move_interval

    def set_next_direction(self, direction: Direction) -> None:
        """Queue a turn, ignoring one that would reverse the snake."""
        if _OPPOSITES[direction] is not self.direction:
            self.next_direction = direction

    def update(self) -> bool:
        """Advance one tick; return True when the snake moved forward."""
        self._move_timer += 1
        if self._move_timer < self._move_interval:
            return False
        self._move_timer = 0
        self._extend_forward()
        return True

    def _extend_forward(self) -> None:
        self.direction = self.next_direction
        dx, dy = _STEPS[self.direction]
        head = self.body[0]
        self.body.insert(0, Position(head.x + dx, head.y + dy))

    def cut_tail(self) -> None:
        """Drop the last segment."""
        if len(self.body) <= 1:
            raise ValueError("invalid command: can't cut tail of snake with size less than 2")
        self.body.pop()

    def decrease_move_interval(self, amount: int) -> None:
        """Speed up by ``amount`` ticks, never below the minimum interval."""
        self._move_interval = max(self._move_interval - amount, self._min_move_interval)

    def check_collisions_with_self(self) -> None:
        """Mark the snake dead if its head overlaps its body."""
        if self.body[0] in self.body[1:]:
            self.is_alive = False