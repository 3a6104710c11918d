import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pygame
import pytest

from snakegame.config import Config
from snakegame.core import GameState
from snakegame.ranking_scene import RECORDS_NUMBER, RankingField, RankingScene
from snakegame.storage import Record, Repository, SqlRepository
from snakegame.ui import InputState, Key


class FakeFont:
    def size(self, text):
        return (8 * len(text), 16)

    def render(self, text, antialias, color):
        return pygame.Surface(self.size(text))

    def get_ascent(self):
        return 12

    def get_height(self):
        return 16


class RecordingRepository(Repository):
    def __init__(self, fail=False):
        self.filters = []
        self.fail = fail

    def save_record(self, record):
        pass

    def get_top_records(self, filter):
        self.filters.append(filter)
        if self.fail:
            raise RuntimeError("database unavailable")
        return []

    def close(self):
        pass


@dataclass
class FakeAccessor:
    repository: object = None
    config: Config = field(default_factory=Config)
    assets: object = field(
        default_factory=lambda: SimpleNamespace(ui_font=FakeFont(), title_font=FakeFont())
    )
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("ranking-test"))
    score: int = 0
    game_time: timedelta = timedelta()

    def notify_food_eaten(self):
        return False

    def reset(self):
        pass

    def start_game(self, level):
        pass


@pytest.fixture
def sql_repo():
    repo = SqlRepository(":memory:")
    now = datetime.now(timezone.utc)
    repo.save_record(Record("alice", 5, timedelta(seconds=30), "lvl", now))
    repo.save_record(Record("bob", 9, timedelta(seconds=40), "lvl", now))
    repo.save_record(Record("al", 7, timedelta(seconds=50), "other", now))
    yield repo
    repo.close()


def click(rect, text=""):
    return InputState(cursor=rect.center, mouse_clicked=True, text=text)


def test_initial_load_uses_default_filter():
    repo = RecordingRepository()
    scene = RankingScene(FakeAccessor(repository=repo))
    first = repo.filters[0]
    assert first.player_name_prefix == ""
    assert first.level_name == ""
    assert first.is_score_asc is False
    assert first.is_time_asc is True
    assert first.players_max_number == RECORDS_NUMBER
    assert scene.load_error is None


def test_records_ordered_by_score_descending(sql_repo):
    scene = RankingScene(FakeAccessor(repository=sql_repo))
    assert [r.player_name for r in scene.records] == ["bob", "al", "alice"]


def test_player_prefix_and_level_filters(sql_repo):
    scene = RankingScene(FakeAccessor(repository=sql_repo))
    scene.update(click(scene.player_rect, "al"))
    assert scene.active_field is RankingField.PLAYER
    assert [r.player_name for r in scene.records] == ["al", "alice"]
    scene.update(click(scene.level_rect, "lvl"))
    assert scene.active_field is RankingField.LEVEL
    assert [r.player_name for r in scene.records] == ["alice"]


def test_backspace_reloads_records(sql_repo):
    scene = RankingScene(FakeAccessor(repository=sql_repo))
    scene.update(click(scene.player_rect, "bo"))
    assert [r.player_name for r in scene.records] == ["bob"]
    scene.update(InputState(keys={Key.BACKSPACE}))
    scene.update(InputState(keys={Key.BACKSPACE}))
    assert scene.player_name.text == ""
    assert len(scene.records) == 3


def test_player_name_is_limited():
    repo = RecordingRepository()
    scene = RankingScene(FakeAccessor(repository=repo))
    scene.update(click(scene.player_rect, "x" * 40))
    assert scene.player_name.text == "x" * 13
    assert repo.filters[-1].player_name_prefix == "x" * 13


def test_typing_without_active_field_is_ignored():
    repo = RecordingRepository()
    scene = RankingScene(FakeAccessor(repository=repo))
    scene.update(InputState(text="abc"))
    assert scene.player_name.text == ""
    assert len(repo.filters) == 1


def test_score_button_toggles_order_and_reloads():
    repo = RecordingRepository()
    scene = RankingScene(FakeAccessor(repository=repo))
    button = scene.score_button
    scene.update(InputState(cursor=(int(button.x) + 1, int(button.y) + 1), mouse_clicked=True))
    assert scene.is_score_asc is True
    assert repo.filters[-1].is_score_asc is True


def test_time_button_toggles_order_and_reloads():
    repo = RecordingRepository()
    scene = RankingScene(FakeAccessor(repository=repo))
    button = scene.time_button
    scene.update(InputState(cursor=(int(button.x) + 1, int(button.y) + 1), mouse_clicked=True))
    assert scene.is_time_asc is False
    assert repo.filters[-1].is_time_asc is False


def test_escape_returns_to_main_menu():
    scene = RankingScene(FakeAccessor(repository=RecordingRepository()))
    assert scene.update(InputState(keys={Key.ESCAPE})) is GameState.MAIN_MENU
    assert scene.update(InputState()) is GameState.BEST_SCORES


def test_failing_repository_sets_load_error():
    scene = RankingScene(FakeAccessor(repository=RecordingRepository(fail=True)))
    assert isinstance(scene.load_error, RuntimeError)
    assert scene.records == []


def test_missing_repository_sets_load_error():
    scene = RankingScene(FakeAccessor())
    assert scene.load_error is not None
    assert scene.records == []


def test_on_enter_resets_filters(sql_repo):
    scene = RankingScene(FakeAccessor(repository=sql_repo))
    scene.update(click(scene.player_rect, "bo"))
    scene.is_score_asc = True
    scene.on_enter()
    assert scene.player_name.text == ""
    assert scene.is_score_asc is False
    assert scene.active_field is RankingField.NONE
    assert len(scene.records) == 3


def test_draw_fills_background(sql_repo):
    scene = RankingScene(FakeAccessor(repository=sql_repo))
    screen = pygame.Surface((2400, 1230))
    scene.draw(screen)
    assert tuple(screen.get_at((0, 0)))[:3] == (0x0A, 0x19, 0x4E)


def test_draw_with_error_keeps_background():
    scene = RankingScene(FakeAccessor(repository=RecordingRepository(fail=True)))
    screen = pygame.Surface((2400, 1230))
    scene.draw(screen)
    assert tuple(screen.get_at((0, 0)))[:3] == (0x0A, 0x19, 0x4E)