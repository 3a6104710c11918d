import logging
from datetime import timedelta

import pygame
import pytest

from snakegame.assets import Assets
from snakegame.config import Config
from snakegame.core import GameState, Level
from snakegame.create_level_scene import CreateLevelScene
from snakegame.game import Game
from snakegame.game_over_scene import GameOverScene
from snakegame.main_menu_scene import MainMenuScene
from snakegame.playing_scene import PlayingScene
from snakegame.ui import InputState


@pytest.fixture
def assets():
    pygame.font.init()
    surfaces = {
        name: pygame.Surface((8, 8))
        for name in ("snake_head", "snake_body", "snake_body_corner", "snake_tail", "apple", "wall")
    }
    return Assets(
        **surfaces,
        ui_font=pygame.font.Font(None, 16),
        title_font=pygame.font.Font(None, 25),
    )


@pytest.fixture
def cfg():
    return Config(logger=logging.getLogger("snakegame.test"))


@pytest.fixture
def game(cfg, assets, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return Game(cfg, assets, None, 10)


def test_starts_in_main_menu_with_zero_score(game):
    assert isinstance(game.current_scene, MainMenuScene)
    assert game.score == 0
    assert game.game_time == timedelta(0)


def test_main_menu_entry_creates_levels_directory(game, tmp_path):
    levels = tmp_path / "levels"
    levels.rmdir()
    menu = game.current_scene
    menu.on_enter()
    assert levels.is_dir()
    assert menu.level_names == []
    assert menu.selected_level_label == "Levels not found"

    (levels / "arena.json").write_text('{"name": "arena"}')
    menu.on_enter()
    assert menu.level_names == ["arena.json"]
    assert menu.selected_level_label == "arena"


def test_layout_is_logical_screen(game, cfg):
    assert game.layout(10, 10) == (cfg.screen_width, cfg.window_height())


def test_rejects_non_positive_tick_rate(cfg, assets, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError):
        Game(cfg, assets, None, 0)


def test_speed_increase_every_interval(game, cfg):
    results = [game.notify_food_eaten() for _ in range(cfg.speed_increase_interval)]
    assert results == [False] * (cfg.speed_increase_interval - 1) + [True]
    assert game.score == cfg.speed_increase_interval


def test_no_speed_increase_when_interval_is_zero(cfg, assets, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg.speed_increase_interval = 0
    game = Game(cfg, assets, None, 10)
    assert not any(game.notify_food_eaten() for _ in range(12))
    assert game.score == 12


def test_start_game_switches_to_playing_and_resets(game):
    game.notify_food_eaten()
    game.start_game(Level("arena", 10, 10, []))
    assert isinstance(game.current_scene, PlayingScene)
    assert game.scenes[GameState.PLAYING] is game.current_scene
    assert isinstance(game.scenes[GameState.GAME_OVER], GameOverScene)
    assert game.score == 0


def test_start_game_with_invalid_snake_stays_in_menu(cfg, assets, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg.initial_snake_len = 1
    game = Game(cfg, assets, None, 10)
    game.start_game(Level("arena", 10, 10, []))
    assert isinstance(game.current_scene, MainMenuScene)
    assert GameState.PLAYING not in game.scenes


def test_game_time_advances_only_while_playing(game):
    game.update(InputState())
    assert game.game_time == timedelta(0)
    game.start_game(Level("arena", 10, 10, []))
    for _ in range(10):
        game.update(InputState())
    assert game.game_time == timedelta(seconds=1)


def test_scene_switch_to_level_editor(game):
    game.current_scene.create_level()
    game.update(InputState())
    assert isinstance(game.current_scene, CreateLevelScene)
    assert game.current_scene is game.scenes[GameState.LEVEL_CREATE]


def test_unknown_state_raises(game):
    game.current_scene.next_state = GameState.PLAYING
    with pytest.raises(ValueError, match="unknown game state"):
        game.update(InputState())


def test_crash_leads_to_game_over(cfg, assets, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg.initial_speed = 1
    game = Game(cfg, assets, None, 10)
    game.start_game(Level("tiny", 3, 3, []))
    for _ in range(5):
        game.update(InputState())
        if isinstance(game.current_scene, GameOverScene):
            break
    assert game.current_scene is game.scenes[GameState.GAME_OVER]


def test_draw_renders_current_scene(game, cfg):
    screen = pygame.Surface(game.layout(0, 0))
    game.draw(screen)
    assert tuple(screen.get_at((0, 0)))[:3] == (20, 20, 40)