"""Game configuration values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Config:
    """Screen geometry, snake parameters and the shared logger."""

    screen_width: int = 2400
    screen_height: int = 1200
    top_bar_height: int = 30
    tile_size: int = 120
    initial_snake_len: int = 2
    initial_speed: int = 30
    speed_increase_interval: int = 5
    speed_increase_amount: int = 5
    max_speed: int = 5
    logger: Optional[logging.Logger] = field(default=None, compare=False, repr=False)

    def window_height(self) -> int:
        """Total window height: the top bar plus the playing field."""
        return self.top_bar_height + self.screen_height


def load_config() -> Config:
    """Return the default game configuration."""
    return Config()