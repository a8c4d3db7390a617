"""Sorted in-memory view of the players table."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from rosterbook.config.positions import position_rank
from rosterbook.models import PlayerRecord
from rosterbook.persistence import RosterStore


def sort_records(records: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """Order records by position priority.

    The sort is stable, so players sharing a position keep storage order.
    Positions missing from the priority table go last.
    """

    return sorted(records, key=lambda record: position_rank(record.position))


class RosterCache:
    """Disposable projection of the store, rebuilt wholesale on reload."""

    def __init__(self, records: Sequence[PlayerRecord] = ()):
        self._records: List[PlayerRecord] = sort_records(records)

    def reload(self, store: RosterStore) -> List[PlayerRecord]:
        self._records = sort_records(store.load_all_records())
        return self.records

    def clear(self) -> None:
        self._records = []

    @property
    def records(self) -> List[PlayerRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> PlayerRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(self._records)
