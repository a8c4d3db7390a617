"""Position codes and the display priority used to order the roster."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple


PLACEHOLDER_POSITION = "select"

# Earlier codes sort first in the roster table.
POSITION_PRIORITY: Tuple[str, ...] = (
    "CF",
    "SS",
    "RWF",
    "LWF",
    "AMF",
    "RMF",
    "LMF",
    "CMF",
    "DMF",
    "RB",
    "LB",
    "CB",
    "GK",
)

_POSITION_LABELS: Dict[str, str] = {
    "CF": "Centre Forward",
    "SS": "Second Striker",
    "RWF": "Right Wing Forward",
    "LWF": "Left Wing Forward",
    "AMF": "Attacking Midfielder",
    "RMF": "Right Midfielder",
    "LMF": "Left Midfielder",
    "CMF": "Centre Midfielder",
    "DMF": "Defensive Midfielder",
    "RB": "Right Back",
    "LB": "Left Back",
    "CB": "Centre Back",
    "GK": "Goalkeeper",
}

_RANKS: Mapping[str, int] = {code: idx for idx, code in enumerate(POSITION_PRIORITY)}

# Rank shared by every code missing from the priority table.
UNKNOWN_POSITION_RANK = len(POSITION_PRIORITY)


def iter_positions() -> Iterable[Tuple[str, str]]:
    """Return ``(code, label)`` pairs in priority order."""

    return ((code, _POSITION_LABELS[code]) for code in POSITION_PRIORITY)


def is_known_position(code: str) -> bool:
    return code in _RANKS


def position_rank(code: str) -> int:
    """Sort key for a position code; unknown codes rank after all known ones."""

    return _RANKS.get(code, UNKNOWN_POSITION_RANK)


def position_label(code: str) -> str:
    """Human label for a code, falling back to the raw code."""

    return _POSITION_LABELS.get(code, code)
