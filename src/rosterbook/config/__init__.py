"""Configuration helpers for positions and runtime settings."""

from .positions import (
    PLACEHOLDER_POSITION,
    POSITION_PRIORITY,
    UNKNOWN_POSITION_RANK,
    is_known_position,
    iter_positions,
    position_label,
    position_rank,
)
from .settings import DEFAULT_ROSTER_CAP, RosterSettings, load_settings

__all__ = [
    "DEFAULT_ROSTER_CAP",
    "PLACEHOLDER_POSITION",
    "POSITION_PRIORITY",
    "RosterSettings",
    "UNKNOWN_POSITION_RANK",
    "is_known_position",
    "iter_positions",
    "load_settings",
    "position_label",
    "position_rank",
]
