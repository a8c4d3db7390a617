"""SQLite persistence for roster players and the target budget."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from rosterbook.errors import (
    RecordNotFound,
    StorageBackendError,
    StorageBlocked,
    StorageError,
    StorageNotOpen,
    StorageUnsupported,
)
from rosterbook.models import PlayerRecord


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

SCHEMA_VERSION = 1
TARGET_KEY = "targetValue"


def _is_locked(exc: sqlite3.Error) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class RosterStore:
    """SQLite-backed store holding the ``players`` and ``settings`` tables.

    The store keeps a single connection opened by :meth:`open`. Every write
    runs in its own transaction and nothing read from disk is cached here;
    callers reload after writing.
    """

    def __init__(self, db_path: Path | str, *, timeout: float = 5.0):
        self.db_path = db_path
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "RosterStore":
        if self._conn is not None:
            return self
        if str(self.db_path) == ":memory:" or str(self.db_path).startswith("file::memory:"):
            raise StorageUnsupported("An in-memory database cannot hold the roster durably")

        path = Path(self.db_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnsupported(f"Cannot create storage directory {path.parent}: {exc}") from exc

        try:
            conn = sqlite3.connect(path, timeout=self._timeout, check_same_thread=False)
        except sqlite3.OperationalError as exc:
            raise StorageUnsupported(f"Cannot open database at {path}: {exc}") from exc
        conn.row_factory = sqlite3.Row

        try:
            self._ensure_schema(conn)
        except sqlite3.Error as exc:
            conn.close()
            if _is_locked(exc):
                raise StorageBlocked(
                    f"Database at {path} is locked by another connection; cannot initialize schema"
                ) from exc
            raise StorageBackendError(f"Failed to initialize database at {path}: {exc}") from exc

        self._conn = conn
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        version = conn.execute("PRAGMA user_version").fetchone()[0]
        if version == SCHEMA_VERSION:
            return
        if version:
            logger.warning(
                "Schema version %s at %s does not match %s; dropping all roster data",
                version,
                self.db_path,
                SCHEMA_VERSION,
            )
        else:
            logger.info("Initializing roster schema v%s at %s", SCHEMA_VERSION, self.db_path)

        conn.execute("BEGIN IMMEDIATE")
        try:
            conn.execute("DROP TABLE IF EXISTS players")
            conn.execute("DROP TABLE IF EXISTS settings")
            conn.execute(
                """
                CREATE TABLE players (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    position TEXT NOT NULL,
                    playing_style TEXT NOT NULL,
                    value INTEGER NOT NULL CHECK (value > 0)
                )
                """
            )
            conn.execute("CREATE INDEX idx_players_name ON players (name)")
            conn.execute("CREATE INDEX idx_players_position ON players (position)")
            conn.execute(
                """
                CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value INTEGER
                )
                """
            )
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    def _require(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageNotOpen("Roster storage has not been opened")
        return self._conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._require()
        try:
            with conn:
                yield conn
        except (sqlite3.Error, OverflowError) as exc:
            raise StorageBackendError(f"Storage operation failed: {exc}") from exc

    def load_all_records(self) -> List[PlayerRecord]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT id, name, position, playing_style, value FROM players ORDER BY id"
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def load_target(self) -> Optional[int]:
        with self._transaction() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (TARGET_KEY,)).fetchone()
        if row is None or row["value"] is None:
            return None
        return int(row["value"])

    def save_record(self, record: PlayerRecord, editing_id: Optional[int] = None) -> PlayerRecord:
        """Insert ``record``, or overwrite the row at ``editing_id`` keeping its id."""

        payload = (record.name, record.position, record.playing_style, record.value)
        with self._transaction() as conn:
            if editing_id is not None:
                cursor = conn.execute(
                    """
                    UPDATE players
                    SET name = ?, position = ?, playing_style = ?, value = ?
                    WHERE id = ?
                    """,
                    (*payload, editing_id),
                )
                if cursor.rowcount == 0:
                    raise RecordNotFound(f"Player {editing_id} no longer exists")
                return record.with_id(editing_id)
            cursor = conn.execute(
                "INSERT INTO players (name, position, playing_style, value) VALUES (?, ?, ?, ?)",
                payload,
            )
            if cursor.lastrowid is None:  # pragma: no cover
                raise StorageBackendError("Insert did not produce a player id")
            return record.with_id(cursor.lastrowid)

    def save_target(self, value: int) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (TARGET_KEY, value),
            )

    def delete_record(self, record_id: int) -> bool:
        """Delete a player; returns False when the id was already gone."""

        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def clear_all(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM players")
            conn.execute("DELETE FROM settings")

    def _row_to_record(self, row: sqlite3.Row) -> PlayerRecord:
        return PlayerRecord(
            id=row["id"],
            name=row["name"],
            position=row["position"],
            playing_style=row["playing_style"],
            value=row["value"],
        )


__all__ = [
    "RosterStore",
    "SCHEMA_VERSION",
    "StorageError",
    "TARGET_KEY",
]
