"""Roster cache and statistics."""

from .cache import RosterCache, sort_records
from .stats import RosterStats, compute_stats

__all__ = [
    "RosterCache",
    "RosterStats",
    "compute_stats",
    "sort_records",
]
