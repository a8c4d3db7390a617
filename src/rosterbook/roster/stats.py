"""Derived budget figures for the current roster."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from rosterbook.models import PlayerRecord


@dataclass(frozen=True)
class RosterStats:
    total_value: int
    remaining: Optional[int]
    remaining_slots: int
    average: Optional[int]


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


def compute_stats(
    records: Iterable[PlayerRecord],
    target: Optional[int],
    roster_cap: int,
) -> RosterStats:
    """Compute totals against ``target`` for a roster capped at ``roster_cap``.

    ``remaining`` and ``average`` are ``None`` while no target is set;
    ``average`` is also ``None`` once the roster is full.
    """

    records = list(records)
    total_value = sum(record.value or 0 for record in records)
    remaining_slots = max(0, roster_cap - len(records))

    if target is None:
        return RosterStats(total_value, None, remaining_slots, None)

    remaining = max(0, target - total_value)
    average = _round_half_up(remaining, remaining_slots) if remaining_slots > 0 else None
    return RosterStats(total_value, remaining, remaining_slots, average)
