"""Score records and their SQL-backed repository."""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

_SCHEMA = """CREATE TABLE IF NOT EXISTS records(
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    player_name VARCHAR(50) NOT NULL,
    score INT NOT NULL,
    time_in_seconds INT NOT NULL,
    level_name VARCHAR(50) NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)"""

_BASE_QUERY = (
    "SELECT player_name, score, time_in_seconds, level_name, created_at FROM records"
)

_INSERT = (
    "INSERT INTO records (player_name, score, time_in_seconds, level_name) "
    "VALUES (?1, ?2, ?3, ?4)"
)

_ORDER = {True: "ASC", False: "DESC"}


@dataclass
class Record:
    """One finished game."""

    player_name: str
    score: int
    time: timedelta
    level_name: str
    created_at: datetime
    id: int = 0

    def __post_init__(self) -> None:
        if self.player_name == " ":
            self.player_name = "undefined"


@dataclass(frozen=True)
class Filter:
    """Selection and ordering for the top-records query."""

    player_name_prefix: str = ""
    level_name: str = ""
    is_score_asc: bool = False
    is_time_asc: bool = True
    players_max_number: int = 0


class Repository(ABC):
    """Persistent store of game records."""

    @abstractmethod
    def save_record(self, record: Record) -> None:
        """Store a record."""

    @abstractmethod
    def get_top_records(self, filter: Filter) -> list[Record]:
        """Return records matching ``filter`` in its order."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""


def build_top_records_query(filter: Filter) -> tuple[str, list[Any]]:
    """Build the SQL text and its parameters for a top-records query."""
    clauses: list[str] = []
    args: list[Any] = []
    if filter.player_name_prefix:
        args.append(filter.player_name_prefix + "%")
        clauses.append(f"player_name LIKE ?{len(args)}")
    if filter.level_name:
        args.append(filter.level_name)
        clauses.append(f"level_name = ?{len(args)}")

    query = _BASE_QUERY
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += (
        f" ORDER BY score {_ORDER[bool(filter.is_score_asc)]}, "
        f"time_in_seconds {_ORDER[bool(filter.is_time_asc)]}"
    )
    if filter.players_max_number > 0:
        args.append(filter.players_max_number)
        query += f" LIMIT ?{len(args)}"
    return query, args


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        stamp = value
    elif isinstance(value, str):
        stamp = datetime.fromisoformat(value)
    else:
        raise ValueError(f"unexpected created_at value: {value!r}")
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


class SqlRepository(Repository):
    """Repository kept in an SQLite database."""

    def __init__(self, database: str, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._conn = sqlite3.connect(database)
        try:
            self._conn.execute("PRAGMA case_sensitive_like = ON")
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error:
            self._conn.close()
            raise
        self._logger.info("database opened, schema initialized")

    def save_record(self, record: Record) -> None:
        seconds = int(record.time.total_seconds())
        try:
            cursor = self._conn.execute(
                _INSERT, (record.player_name, record.score, seconds, record.level_name)
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._logger.error("failed to save record: %s", exc)
            raise
        if cursor.rowcount == 0:
            self._logger.warning("no rows were affected during saving record")
            return
        self._logger.info(
            "record saved successfully: player=%s score=%d time=%ss level=%s",
            record.player_name,
            record.score,
            seconds,
            record.level_name,
        )

    def get_top_records(self, filter: Filter) -> list[Record]:
        query, args = build_top_records_query(filter)
        self._logger.info("made query: %s", query)
        try:
            rows = self._conn.execute(query, args).fetchall()
        except sqlite3.Error as exc:
            self._logger.error("failed to execute query: %s", exc)
            raise
        return [
            Record(
                player_name=player_name,
                score=score,
                time=timedelta(seconds=seconds),
                level_name=level_name,
                created_at=_parse_timestamp(created_at),
            )
            for player_name, score, seconds, level_name, created_at in rows
        ]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqlRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()