"""Input snapshot, buttons and rectangle drawing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional, Sequence

import pygame

if TYPE_CHECKING:
    from .assets import Assets

Color = Sequence[int]

WHITE = (255, 255, 255)


class Key(Enum):
    """Keys the game reacts to."""

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    R = auto()


@dataclass(frozen=True)
class InputState:
    """Input gathered during one tick.

    ``keys`` holds the keys pressed during this tick, ``text`` the characters
    typed, ``mouse_clicked`` whether the left button was just pressed.
    """

    cursor: tuple[int, int] = (0, 0)
    mouse_clicked: bool = False
    keys: frozenset[Key] = field(default_factory=frozenset)
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", frozenset(self.keys))


def draw_rectangle(
    screen: pygame.Surface, x: float, y: float, width: float, height: float, color: Color
) -> None:
    """Fill a rectangle; a colour with alpha below 255 is blended over the screen."""
    w, h = int(width), int(height)
    if w <= 0 or h <= 0:
        return
    if len(color) == 4 and color[3] < 255:
        overlay = pygame.Surface((w, h), pygame.SRCALPHA)
        overlay.fill(color)
        screen.blit(overlay, (int(x), int(y)))
    else:
        screen.fill(color, pygame.Rect(int(x), int(y), w, h))


@dataclass
class Button:
    """A clickable labelled rectangle."""

    x: float
    y: float
    width: float
    height: float
    text: str
    on_click: Optional[Callable[[], None]] = None
    color: Color = (0x8A, 0x2B, 0xE2)
    hover_color: Color = (0x99, 0x32, 0xCC)
    is_hovered: bool = False

    def contains(self, x: float, y: float) -> bool:
        """Whether the point lies inside the button (right and bottom edges excluded)."""
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def update(self, inputs: InputState) -> None:
        """Track hovering and fire the click handler on a click inside the button."""
        self.is_hovered = self.contains(*inputs.cursor)
        if self.is_hovered and inputs.mouse_clicked and self.on_click is not None:
            self.on_click()

    def draw(self, screen: pygame.Surface, assets: "Assets") -> None:
        """Draw the button with its label centred."""
        fill = self.hover_color if self.is_hovered else self.color
        draw_rectangle(screen, self.x, self.y, self.width, self.height, fill)
        label = assets.ui_font.render(self.text, True, WHITE)
        text_x = self.x + (self.width - label.get_width()) / 2
        text_y = self.y + (self.height - label.get_height()) / 2
        screen.blit(label, (int(text_x), int(text_y)))