"""Command-line entry point that opens the game window."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys
from typing import Iterable, Optional, Sequence

import pygame
from dotenv import load_dotenv

from .assets import load_assets
from .config import load_config
from .game import DEFAULT_TICKS_PER_SECOND, Game
from .storage import SqlRepository
from .ui import InputState, Key

WINDOW_TITLE = "Snake"

_KEYS = {
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_RETURN: Key.ENTER,
    pygame.K_KP_ENTER: Key.ENTER,
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_BACKSPACE: Key.BACKSPACE,
    pygame.K_r: Key.R,
}


def _make_logger() -> logging.Logger:
    logger = logging.getLogger("snakegame")
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "time=%(asctime)s level=%(levelname)s msg=%(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        logger.addHandler(handler)
    return logger


def _inputs_from_events(
    events: Iterable[pygame.event.Event], cursor: tuple[int, int]
) -> tuple[InputState, bool]:
    """Fold one tick of events into an input snapshot; the flag tells whether to quit."""
    keys: set[Key] = set()
    text: list[str] = []
    clicked = False
    quit_requested = False
    for event in events:
        if event.type == pygame.QUIT:
            quit_requested = True
        elif event.type == pygame.KEYDOWN:
            key = _KEYS.get(event.key)
            if key is not None:
                keys.add(key)
        elif event.type == pygame.TEXTINPUT:
            text.append(event.text)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            clicked = True
    state = InputState(
        cursor=(int(cursor[0]), int(cursor[1])),
        mouse_clicked=clicked,
        keys=frozenset(keys),
        text="".join(text),
    )
    return state, quit_requested


def _run(game: Game, ticks_per_second: int) -> None:
    cfg = game.config
    pygame.init()
    try:
        size = game.layout(cfg.screen_width, cfg.window_height())
        screen = pygame.display.set_mode(size)
        pygame.display.set_caption(WINDOW_TITLE)
        pygame.key.start_text_input()
        clock = pygame.time.Clock()
        while True:
            inputs, quit_requested = _inputs_from_events(
                pygame.event.get(), pygame.mouse.get_pos()
            )
            if quit_requested:
                return
            game.update(inputs)
            screen.fill((0, 0, 0))
            game.draw(screen)
            pygame.display.flip()
            clock.tick(ticks_per_second)
    finally:
        pygame.quit()


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="snakegame", description="Play snake.")
    parser.add_argument("--skin", default="snake", help="sprite set to use")
    parser.add_argument("--assets-root", default=None, help="directory holding images/ and fonts/")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load assets and settings, connect to the record store if configured, and play."""
    args = _parse_args(argv)
    logger = _make_logger()

    cfg = load_config()
    cfg.logger = logger

    try:
        assets = load_assets(args.skin, args.assets_root)
    except (OSError, pygame.error) as exc:
        logger.error("failed to initialize assets: %s", exc)
        return 1
    logger.info("assets successfully loaded")

    if not load_dotenv():
        logger.warning("failed to load from .env")

    with contextlib.ExitStack() as stack:
        repo = None
        database_url = os.environ.get("DATABASE_URL", "")
        if not database_url:
            logger.warning("DATABASE_URL environment variable is not set, running without database")
        else:
            try:
                repo = SqlRepository(database_url, logger)
            except Exception as exc:  # any connection failure ends start-up
                logger.error("failed to connect to database: %s", exc)
                return 1
            stack.callback(repo.close)

        game = Game(cfg, assets, repo)
        logger.info("game successfully initialized")

        try:
            _run(game, DEFAULT_TICKS_PER_SECOND)
        except ValueError as exc:
            logger.error("game finished with error: %s", exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())