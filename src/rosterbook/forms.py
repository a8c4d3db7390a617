"""Parsing and validation of raw user input."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from rosterbook.config.positions import PLACEHOLDER_POSITION, is_known_position
from rosterbook.errors import ValidationError
from rosterbook.models import MAX_STORED_INT, PlayerRecord


_INT_PATTERN = re.compile(r"^[+-]?\d+$")
_MAX_DIGITS = len(str(MAX_STORED_INT))


def parse_int(raw: Any) -> Optional[int]:
    """Parse a whole number from user input.

    Returns None when the input is not a whole number or falls outside the
    range SQLite can store.
    """

    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if abs(raw) <= MAX_STORED_INT else None
    if raw is None:
        return None
    text = str(raw).strip()
    if not _INT_PATTERN.match(text):
        return None
    if len(text.lstrip("+-").lstrip("0")) > _MAX_DIGITS:
        return None
    value = int(text)
    return value if abs(value) <= MAX_STORED_INT else None


def _text(fields: Mapping[str, Any], key: str) -> str:
    value = fields.get(key)
    return "" if value is None else str(value).strip()


def parse_player_form(fields: Mapping[str, Any]) -> PlayerRecord:
    """Validate form fields and build an unsaved record.

    Checks run in a fixed order and the first failure is raised.
    """

    name = _text(fields, "name")
    if not name:
        raise ValidationError("Player name is required")

    position = _text(fields, "position")
    if not position or position == PLACEHOLDER_POSITION:
        raise ValidationError("Select a position")
    if not is_known_position(position):
        raise ValidationError(f"Unknown position {position!r}")

    playing_style = _text(fields, "playing_style")
    if not playing_style:
        raise ValidationError("Playing style is required")

    value = parse_int(fields.get("value"))
    if value is None:
        raise ValidationError(f"Value must be a whole number no larger than {MAX_STORED_INT}")
    if value <= 0:
        raise ValidationError("Value must be greater than zero")

    return PlayerRecord(name=name, position=position, playing_style=playing_style, value=value)


def parse_target(raw: Any) -> int:
    target = parse_int(raw)
    if target is None:
        raise ValidationError(f"Please enter a whole number no larger than {MAX_STORED_INT} for the target")
    if target <= 0:
        raise ValidationError("Target must be greater than zero")
    return target
