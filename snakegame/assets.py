"""Loading of sprites and fonts used by the game."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pygame

UI_FONT_SIZE = 16
TITLE_FONT_SIZE = 25
FONT_FILE = "PressStart2P-Regular.ttf"

_DEFAULT_ROOT = Path(__file__).with_name("resources")

_IMAGE_FILES = {
    "snake_head": "head.png",
    "snake_body": "body.png",
    "snake_body_corner": "body_corner.png",
    "snake_tail": "tail.png",
    "apple": "food.png",
    "wall": "wall.png",
}


@dataclass
class Assets:
    """Sprites of one skin together with the interface fonts."""

    snake_head: pygame.Surface
    snake_body: pygame.Surface
    snake_body_corner: pygame.Surface
    snake_tail: pygame.Surface
    apple: pygame.Surface
    wall: pygame.Surface
    ui_font: pygame.font.Font
    title_font: pygame.font.Font


def _require_file(path: Path) -> Path:
    if not path.is_file():
        raise FileNotFoundError(f"asset not found: {path}")
    return path


def _load_image(path: Path) -> pygame.Surface:
    return pygame.image.load(str(_require_file(path)))


def load_assets(skin: str = "snake", root: Optional[Union[str, Path]] = None) -> Assets:
    """Load the sprites of ``skin`` and the fonts from the asset directory ``root``.

    ``root`` holds ``images/<skin>/*.png`` and ``fonts/``; it defaults to the
    resources shipped with the package.
    """
    base = Path(root) if root is not None else _DEFAULT_ROOT
    skin_dir = base / "images" / skin
    images = {name: _load_image(skin_dir / filename) for name, filename in _IMAGE_FILES.items()}

    font_path = str(_require_file(base / "fonts" / FONT_FILE))
    if not pygame.font.get_init():
        pygame.font.init()

    return Assets(
        **images,
        ui_font=pygame.font.Font(font_path, UI_FONT_SIZE),
        title_font=pygame.font.Font(font_path, TITLE_FONT_SIZE),
    )