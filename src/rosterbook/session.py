"""Roster session: owns the store, the cache and all mutable roster state."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, List, Mapping, Optional, Sequence

import anyio.to_thread

from rosterbook.config.settings import DEFAULT_ROSTER_CAP, RosterSettings
from rosterbook.errors import (
    RecordNotFound,
    RosterError,
    SessionBusy,
    StorageError,
    ValidationError,
)
from rosterbook.forms import parse_int, parse_player_form, parse_target
from rosterbook.models import PlayerRecord
from rosterbook.persistence import RosterStore
from rosterbook.roster import RosterCache, RosterStats, compute_stats


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

DELETE_PROMPT = "Are you sure you want to delete this player?"
RESET_PROMPT = "Are you sure you want to reset ALL data? This cannot be undone."
RESET_PHRASE = "RESET"

ConfirmGate = Callable[[str], bool]
RenderCallback = Callable[[Sequence[PlayerRecord], RosterStats], None]


@dataclass(frozen=True)
class Outcome:
    """User-facing result of one session operation."""

    ok: bool
    message: str
    record: Optional[PlayerRecord] = None
    cancelled: bool = False


@dataclass(frozen=True)
class EditCursor:
    index: int
    record_id: int
    record: PlayerRecord


class RosterSession:
    """Single owner of roster state for one user.

    Every mutation awaits its storage write and the following reload before
    returning, and a second mutation submitted meanwhile is rejected with
    :class:`SessionBusy`. Errors are logged and turned into failed
    :class:`Outcome` values; only :meth:`start` lets storage errors escape.
    """

    def __init__(
        self,
        store: RosterStore,
        *,
        default_roster_cap: int = DEFAULT_ROSTER_CAP,
        on_render: Optional[RenderCallback] = None,
    ):
        self._store = store
        self._cache = RosterCache()
        self._target: Optional[int] = None
        self._editing: Optional[EditCursor] = None
        self._default_roster_cap = default_roster_cap
        self._roster_cap = default_roster_cap
        self._on_render = on_render
        self._busy = False
        self._started = False

    @classmethod
    def from_settings(
        cls,
        settings: RosterSettings,
        *,
        on_render: Optional[RenderCallback] = None,
    ) -> "RosterSession":
        store = RosterStore(settings.db_path, timeout=settings.db_timeout)
        return cls(store, default_roster_cap=settings.roster_cap, on_render=on_render)

    @property
    def started(self) -> bool:
        return self._started

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def records(self) -> List[PlayerRecord]:
        return self._cache.records

    @property
    def target(self) -> Optional[int]:
        return self._target

    @property
    def roster_cap(self) -> int:
        return self._roster_cap

    @property
    def default_roster_cap(self) -> int:
        return self._default_roster_cap

    @property
    def editing(self) -> Optional[EditCursor]:
        return self._editing

    @property
    def stats(self) -> RosterStats:
        return compute_stats(self._cache, self._target, self._roster_cap)

    async def start(self) -> None:
        """Open storage and load the roster; storage errors are fatal here."""

        try:
            await anyio.to_thread.run_sync(self._store.open)
            await self._reload()
            self._target = await anyio.to_thread.run_sync(self._store.load_target)
        except StorageError as exc:
            logger.error("Roster storage unavailable: %s", exc)
            raise
        self._started = True
        logger.info("Loaded %d players (target=%s)", len(self._cache), self._target)
        self._render()

    async def close(self) -> None:
        await anyio.to_thread.run_sync(self._store.close)
        self._started = False

    async def submit(self, form: Mapping[str, Any]) -> Outcome:
        """Create a player, or update the one being edited."""

        editing = self._editing
        try:
            async with self._operation():
                record = parse_player_form(form)
                editing_id = editing.record_id if editing is not None else None
                saved = await anyio.to_thread.run_sync(self._store.save_record, record, editing_id)
                self._editing = None
                await self._reload()
        except RecordNotFound as exc:
            self._editing = None
            return self._failed("update player", exc)
        except RosterError as exc:
            return self._failed("save player", exc)

        if editing is not None:
            logger.info("Updated player %s (id=%s)", saved.name, saved.id)
            message = f"Updated {saved.name}"
        else:
            logger.info("Added player %s (id=%s)", saved.name, saved.id)
            message = f"Added {saved.name}"
        self._render()
        return Outcome(True, message, record=saved)

    async def begin_edit(self, index: int) -> Outcome:
        """Point the edit cursor at cache ``index``, replacing any earlier edit."""

        try:
            async with self._operation():
                if not 0 <= index < len(self._cache):
                    raise RecordNotFound(f"No player at position {index} in the roster")
                record = self._cache[index]
                if record.id is None:  # pragma: no cover
                    raise RecordNotFound(f"Player at position {index} has no id")
                self._editing = EditCursor(index=index, record_id=record.id, record=record)
        except RosterError as exc:
            return self._failed("edit player", exc)
        return Outcome(True, f"Editing {record.name}", record=record)

    async def cancel_edit(self) -> Outcome:
        try:
            async with self._operation():
                self._editing = None
        except RosterError as exc:
            return self._failed("cancel edit", exc)
        return Outcome(True, "Edit cancelled")

    async def request_delete(self, record_id: int, confirm: ConfirmGate) -> Outcome:
        if not confirm(DELETE_PROMPT):
            return Outcome(True, "Delete cancelled", cancelled=True)
        try:
            async with self._operation():
                removed = await anyio.to_thread.run_sync(self._store.delete_record, record_id)
                await self._reload()
        except RosterError as exc:
            return self._failed("delete player", exc)

        if removed:
            logger.info("Deleted player id=%s", record_id)
        else:
            logger.info("Player id=%s was already gone", record_id)
        self._render()
        return Outcome(True, "Player deleted")

    async def request_reset(self, confirm: ConfirmGate) -> Outcome:
        if not confirm(RESET_PROMPT):
            return Outcome(True, "Reset cancelled", cancelled=True)
        try:
            async with self._operation():
                await anyio.to_thread.run_sync(self._store.clear_all)
                self._editing = None
                self._target = None
                self._roster_cap = self._default_roster_cap
                await self._reload()
        except RosterError as exc:
            return self._failed("reset data", exc)

        logger.info("Roster reset")
        self._render()
        return Outcome(True, "All data has been reset")

    async def set_target(self, raw: Any) -> Outcome:
        try:
            async with self._operation():
                target = parse_target(raw)
                await anyio.to_thread.run_sync(self._store.save_target, target)
                self._target = target
        except RosterError as exc:
            return self._failed("update target", exc)

        logger.info("Target set to %d", target)
        self._render()
        return Outcome(True, f"Target set to {target}")

    async def set_roster_cap(self, raw: Any) -> Outcome:
        """Change the roster size; unusable input falls back to the default."""

        cap = parse_int(raw)
        if cap is None or cap <= 0:
            logger.warning("Invalid roster cap %r; using default %d", raw, self._default_roster_cap)
            cap = self._default_roster_cap
        try:
            async with self._operation():
                self._roster_cap = cap
        except RosterError as exc:
            return self._failed("update roster size", exc)

        self._render()
        return Outcome(True, f"Roster size set to {cap}")

    @asynccontextmanager
    async def _operation(self) -> AsyncIterator[None]:
        if self._busy:
            raise SessionBusy("Another change is still being saved; try again")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    async def _reload(self) -> None:
        await anyio.to_thread.run_sync(self._cache.reload, self._store)
        self._retarget_cursor()

    def _retarget_cursor(self) -> None:
        # Indexes shift on reload; the captured id is authoritative.
        if self._editing is None:
            return
        for index, record in enumerate(self._cache):
            if record.id == self._editing.record_id:
                self._editing = EditCursor(index=index, record_id=record.id, record=record)
                return
        self._editing = None

    def _render(self) -> None:
        if self._on_render is not None:
            self._on_render(self._cache.records, self.stats)

    def _failed(self, action: str, exc: RosterError) -> Outcome:
        if isinstance(exc, (ValidationError, SessionBusy)):
            logger.warning("Rejected %s: %s", action, exc)
            return Outcome(False, str(exc))
        if isinstance(exc, RecordNotFound):
            logger.error("Cannot %s: %s", action, exc)
            return Outcome(False, str(exc))
        logger.error("Failed to %s: %s", action, exc)
        return Outcome(False, f"Failed to {action}: {exc}")


__all__ = [
    "ConfirmGate",
    "DELETE_PROMPT",
    "EditCursor",
    "Outcome",
    "RESET_PHRASE",
    "RESET_PROMPT",
    "RenderCallback",
    "RosterSession",
]
