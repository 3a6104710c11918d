import math

import pytest

from snakegame.core import (
    Direction,
    Food,
    GameState,
    Level,
    Position,
    Snake,
    Wall,
    corner_to_rotation_angle,
    direction_to_rotation_angle,
    get_direction,
)


@pytest.mark.parametrize(
    "value, state",
    [
        (0, GameState.MAIN_MENU),
        (1, GameState.PLAYING),
        (2, GameState.GAME_OVER),
        (3, GameState.LEVEL_CREATE),
    ],
)
def test_game_state_order_matches_source(value, state):
    assert GameState(value) is state


@pytest.mark.parametrize(
    "first, second, expected",
    [
        (Position(1, 1), Position(1, 2), Direction.UP),
        (Position(1, 3), Position(1, 2), Direction.DOWN),
        (Position(0, 2), Position(1, 2), Direction.LEFT),
        (Position(2, 2), Position(1, 2), Direction.RIGHT),
    ],
)
def test_get_direction(first, second, expected):
    assert get_direction(first, second) is expected


@pytest.mark.parametrize(
    "direction, angle",
    [
        (Direction.RIGHT, 0.0),
        (Direction.LEFT, math.pi),
        (Direction.UP, 3 * math.pi / 2),
        (Direction.DOWN, math.pi / 2),
    ],
)
def test_direction_to_rotation_angle(direction, angle):
    assert direction_to_rotation_angle(direction) == pytest.approx(angle)


@pytest.mark.parametrize(
    "old, new, angle",
    [
        (Direction.RIGHT, Direction.UP, 0.0),
        (Direction.RIGHT, Direction.DOWN, 3 * math.pi / 2),
        (Direction.LEFT, Direction.UP, math.pi / 2),
        (Direction.LEFT, Direction.DOWN, math.pi),
        (Direction.UP, Direction.LEFT, 3 * math.pi / 2),
        (Direction.UP, Direction.RIGHT, math.pi),
        (Direction.DOWN, Direction.LEFT, 0.0),
        (Direction.DOWN, Direction.RIGHT, math.pi / 2),
    ],
)
def test_corner_to_rotation_angle(old, new, angle):
    assert corner_to_rotation_angle(old, new) == pytest.approx(angle)


def test_food_and_wall_positions():
    assert Food(3, 4).position == Position(3, 4)
    assert Wall(7, 1).position == Position(7, 1)


def test_level_round_trip():
    level = Level("arena", 10, 8, [Wall(1, 2), Wall(3, 4)])
    assert Level.from_dict(level.to_dict()) == level


def test_level_to_dict_uses_source_keys():
    data = Level("arena", 10, 8, [Wall(1, 2)]).to_dict()
    assert set(data) == {"name", "grid_width", "grid_height", "walls"}
    assert data["walls"] == [{"X": 1, "Y": 2}]


def test_level_from_dict_is_case_insensitive_and_defaults():
    level = Level.from_dict({"Name": "x", "GRID_WIDTH": 4, "walls": [{"x": 1, "y": 0}]})
    assert level.name == "x"
    assert level.grid_width == 4
    assert level.grid_height == 0
    assert level.walls == [Wall(1, 0)]


def test_level_from_dict_null_walls():
    level = Level.from_dict({"name": "n", "grid_width": 3, "grid_height": 3, "walls": None})
    assert level.walls == []


def test_level_from_dict_rejects_bad_types():
    with pytest.raises(ValueError):
        Level.from_dict({"name": "n", "grid_width": "wide"})
    with pytest.raises(ValueError):
        Level.from_dict({"name": "n", "walls": {"X": 1}})


def test_snake_initial_body():
    x, y, length = 5, 5, 3
    snake = Snake(x, y, length, 3, 1)
    assert len(snake.body) == length
    assert snake.head == Position(x, y)
    for front, back in zip(snake.body, snake.body[1:]):
        assert back == Position(front.x - 1, front.y)
    assert snake.direction is Direction.RIGHT
    assert snake.next_direction is Direction.RIGHT
    assert snake.is_alive


@pytest.mark.parametrize("length", [0, 1])
def test_snake_rejects_short_length(length):
    with pytest.raises(ValueError):
        Snake(0, 0, length, 3, 1)


@pytest.mark.parametrize("interval", [0, -1])
def test_snake_rejects_bad_interval(interval):
    with pytest.raises(ValueError):
        Snake(0, 0, 2, interval, 1)


def test_snake_moves_only_after_interval():
    snake = Snake(5, 5, 2, 3, 1)
    assert snake.update() is False
    assert snake.update() is False
    assert snake.update() is True
    assert len(snake.body) == 3
    assert snake.head == Position(6, 5)
    assert snake.update() is False


def test_snake_turns_and_moves_up():
    snake = Snake(5, 5, 2, 1, 1)
    snake.set_next_direction(Direction.UP)
    assert snake.update() is True
    assert snake.direction is Direction.UP
    assert snake.head == Position(5, 4)


def test_set_next_direction_ignores_reversal():
    snake = Snake(5, 5, 2, 1, 1)
    snake.set_next_direction(Direction.LEFT)
    assert snake.next_direction is Direction.RIGHT
    snake.set_next_direction(Direction.DOWN)
    assert snake.next_direction is Direction.DOWN


def test_cut_tail():
    snake = Snake(5, 5, 2, 1, 1)
    snake.update()
    snake.cut_tail()
    assert len(snake.body) == 2
    snake.cut_tail()
    assert len(snake.body) == 1
    with pytest.raises(ValueError):
        snake.cut_tail()


def test_decrease_move_interval_clamps():
    snake = Snake(0, 0, 2, 30, 5)
    snake.decrease_move_interval(5)
    assert snake.move_interval == 25
    snake.decrease_move_interval(100)
    assert snake.move_interval == 5


def test_check_collisions_with_self():
    snake = Snake(5, 5, 4, 1, 1)
    snake.check_collisions_with_self()
    assert snake.is_alive
    snake.body.append(snake.head)
    snake.check_collisions_with_self()
    assert not snake.is_alive