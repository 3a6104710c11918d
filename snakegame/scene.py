"""Scene interface, the game accessor scenes rely on, and text input."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Optional, Protocol

import pygame

from .config import Config
from .core import GameState, Level
from .storage import Repository
from .ui import InputState

if TYPE_CHECKING:
    from .assets import Assets


class Scene(ABC):
    """One screen of the game."""

    @abstractmethod
    def draw(self, screen: pygame.Surface) -> None:
        """Render the scene."""

    @abstractmethod
    def update(self, inputs: InputState) -> GameState:
        """Advance one tick and return the state the game should be in."""

    @abstractmethod
    def on_enter(self) -> None:
        """Called whenever the scene becomes the current one."""


class GameAccessor(Protocol):
    """What scenes may see and ask of the running game."""

    @property
    def config(self) -> Config:
        """Game configuration."""

    @property
    def assets(self) -> "Assets":
        """Loaded sprites and fonts."""

    @property
    def logger(self) -> logging.Logger:
        """Shared logger."""

    @property
    def repository(self) -> Optional[Repository]:
        """Record store, if any."""

    @property
    def score(self) -> int:
        """Current score."""

    @property
    def game_time(self) -> timedelta:
        """Time spent playing the current game."""

    def notify_food_eaten(self) -> bool:
        """Count eaten food; return True when the snake should speed up."""

    def reset(self) -> None:
        """Reset score and game time."""

    def start_game(self, level: Level) -> None:
        """Start playing ``level``."""


def format_game_time(seconds: float) -> str:
    """Format whole seconds as ``MM:SS``."""
    whole = int(seconds)
    return f"{whole // 60:02d}:{whole % 60:02d}"


@dataclass
class TextInput:
    """Editable single-line text, optionally limited in length."""

    text: str = ""
    max_length: Optional[int] = None

    def append(self, chars: str) -> bool:
        """Append typed characters, truncating to the limit; return whether the text changed."""
        before = len(self.text)
        combined = self.text + chars
        if self.max_length is not None:
            combined = combined[: self.max_length]
        self.text = combined
        return len(combined) != before

    def backspace(self) -> bool:
        """Remove the last character; return whether one was removed."""
        if not self.text:
            return False
        self.text = self.text[:-1]
        return True

    def clear(self) -> None:
        """Remove all text."""
        self.text = ""

    def __str__(self) -> str:
        return self.text