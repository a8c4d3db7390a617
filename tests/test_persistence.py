import sqlite3

import pytest

from rosterbook.errors import (
    RecordNotFound,
    StorageBackendError,
    StorageBlocked,
    StorageNotOpen,
    StorageUnsupported,
)
from rosterbook.models import PlayerRecord
from rosterbook.persistence import SCHEMA_VERSION, RosterStore


def _player(name: str = "Striker", position: str = "CF", value: int = 30) -> PlayerRecord:
    return PlayerRecord(name=name, position=position, playing_style="Goal Poacher", value=value)


@pytest.fixture
def store(tmp_path):
    roster_store = RosterStore(tmp_path / "roster.sqlite").open()
    yield roster_store
    roster_store.close()


def test_operations_require_open(tmp_path):
    store = RosterStore(tmp_path / "roster.sqlite")
    with pytest.raises(StorageNotOpen):
        store.load_all_records()
    with pytest.raises(StorageNotOpen):
        store.save_target(10)


def test_in_memory_database_is_unsupported():
    with pytest.raises(StorageUnsupported):
        RosterStore(":memory:").open()


def test_unreachable_directory_is_unsupported(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("plain file", encoding="utf-8")
    with pytest.raises(StorageUnsupported):
        RosterStore(blocker / "roster.sqlite").open()


def test_round_trip_assigns_id(store):
    saved = store.save_record(_player())
    loaded = store.load_all_records()

    assert saved.id is not None
    assert len(loaded) == 1
    assert loaded[0].id == saved.id
    assert loaded[0].same_fields(_player())


def test_creates_get_distinct_ids(store):
    ids = [store.save_record(_player(name=f"Player {i}")).id for i in range(5)]
    assert len(set(ids)) == 5
    assert [record.id for record in store.load_all_records()] == ids


def test_update_preserves_id(store):
    original = store.save_record(_player())
    updated = store.save_record(_player(name="Renamed", position="SS", value=45), editing_id=original.id)

    records = store.load_all_records()
    assert updated.id == original.id
    assert len(records) == 1
    assert records[0] == updated


def test_update_of_vanished_record_raises(store):
    with pytest.raises(RecordNotFound):
        store.save_record(_player(), editing_id=999)
    assert store.load_all_records() == []


def test_delete_is_idempotent(store):
    keep = store.save_record(_player(name="Keep"))
    drop = store.save_record(_player(name="Drop"))

    assert store.delete_record(drop.id) is True
    after_first = store.load_all_records()
    assert store.delete_record(drop.id) is False
    assert store.load_all_records() == after_first == [keep]


def test_target_slot_upserts(store):
    assert store.load_target() is None
    store.save_target(100)
    assert store.load_target() == 100
    store.save_target(250)
    assert store.load_target() == 250


def test_oversized_target_is_a_backend_error(store):
    with pytest.raises(StorageBackendError):
        store.save_target(2**64)
    assert store.load_target() is None


def test_clear_all_empties_both_tables(store):
    first = store.save_record(_player())
    store.save_target(100)

    store.clear_all()

    assert store.load_all_records() == []
    assert store.load_target() is None
    assert store.save_record(_player()).id > first.id


def test_data_survives_reopen(tmp_path):
    path = tmp_path / "roster.sqlite"
    first = RosterStore(path).open()
    saved = first.save_record(_player())
    first.save_target(80)
    first.close()

    second = RosterStore(path).open()
    try:
        assert second.load_all_records() == [saved]
        assert second.load_target() == 80
    finally:
        second.close()


def test_stale_schema_is_dropped_and_recreated(tmp_path):
    path = tmp_path / "roster.sqlite"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE players (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("INSERT INTO players (name) VALUES ('old')")
    conn.execute("PRAGMA user_version = 99")
    conn.commit()
    conn.close()

    store = RosterStore(path).open()
    try:
        assert store.load_all_records() == []
        assert store.load_target() is None
        assert store.save_record(_player()).id is not None
    finally:
        store.close()

    check = sqlite3.connect(path)
    try:
        assert check.execute("PRAGMA user_version").fetchone()[0] == SCHEMA_VERSION
    finally:
        check.close()


def test_locked_database_blocks_open(tmp_path):
    path = tmp_path / "roster.sqlite"
    holder = sqlite3.connect(path, isolation_level=None)
    try:
        holder.execute("CREATE TABLE legacy (x INTEGER)")
        holder.execute("BEGIN EXCLUSIVE")
        holder.execute("INSERT INTO legacy VALUES (1)")
        with pytest.raises(StorageBlocked):
            RosterStore(path, timeout=0).open()
    finally:
        holder.execute("ROLLBACK")
        holder.close()
