import logging

from snakegame.config import Config, load_config


def test_load_config_defaults():
    cfg = load_config()
    assert cfg.screen_width == 2400
    assert cfg.screen_height == 1200
    assert cfg.top_bar_height == 30
    assert cfg.tile_size == 120
    assert cfg.initial_snake_len == 2
    assert cfg.initial_speed == 30
    assert cfg.speed_increase_interval == 5
    assert cfg.speed_increase_amount == 5
    assert cfg.max_speed == 5
    assert cfg.logger is None


def test_window_height_adds_top_bar():
    cfg = load_config()
    assert cfg.window_height() == cfg.screen_height + cfg.top_bar_height


def test_window_height_custom_values():
    cfg = Config(screen_height=400, top_bar_height=50)
    assert cfg.window_height() == 450


def test_logger_can_be_attached():
    cfg = load_config()
    logger = logging.getLogger("snake-test")
    cfg.logger = logger
    assert cfg.logger is logger
    assert cfg == load_config()


def test_load_config_returns_fresh_instances():
    first = load_config()
    first.tile_size = 10
    assert load_config().tile_size == 120