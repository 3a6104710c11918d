import pygame
import pytest

from snakegame.cli import _inputs_from_events, main
from snakegame.ui import Key


def test_missing_assets_fail_startup(tmp_path):
    assert main(["--assets-root", str(tmp_path)]) == 1


def test_unknown_option_is_rejected():
    with pytest.raises(SystemExit) as info:
        main(["--no-such-option"])
    assert info.value.code == 2


def test_key_events_map_to_keys():
    events = [
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_UP),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_BACKSPACE),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F1),
    ]
    state, quit_requested = _inputs_from_events(events, (0, 0))
    assert state.keys == frozenset({Key.UP, Key.BACKSPACE})
    assert quit_requested is False


def test_text_and_click_are_collected():
    events = [
        pygame.event.Event(pygame.TEXTINPUT, text="ab"),
        pygame.event.Event(pygame.TEXTINPUT, text="c"),
        pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 6)),
    ]
    state, _ = _inputs_from_events(events, (5, 6))
    assert state.text == "abc"
    assert state.mouse_clicked is True
    assert state.cursor == (5, 6)


def test_right_click_is_not_a_click():
    events = [pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(1, 1))]
    state, _ = _inputs_from_events(events, (1, 1))
    assert state.mouse_clicked is False


def test_quit_event_requests_exit():
    _, quit_requested = _inputs_from_events([pygame.event.Event(pygame.QUIT)], (0, 0))
    assert quit_requested is True