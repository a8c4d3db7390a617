"""Pydantic models for API I/O."""

from .player import PlayerResponse, RosterResponse, RosterStatsResponse

__all__ = [
    "PlayerResponse",
    "RosterResponse",
    "RosterStatsResponse",
]
