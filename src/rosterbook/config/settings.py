"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_DB_PATH_ENV = "ROSTERBOOK_DB_PATH"
_ROSTER_CAP_ENV = "ROSTERBOOK_ROSTER_CAP"
_DB_TIMEOUT_ENV = "ROSTERBOOK_DB_TIMEOUT"

# Early rosters were capped at 11 players, later ones at 21; both are valid.
DEFAULT_ROSTER_CAP = 11
DEFAULT_DB_TIMEOUT = 5.0
DEFAULT_DB_FILENAME = "rosterbook.sqlite"


@dataclass(frozen=True)
class RosterSettings:
    db_path: Path | str
    roster_cap: int = DEFAULT_ROSTER_CAP
    db_timeout: float = DEFAULT_DB_TIMEOUT


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s=%d is below %d; using default %d", name, value, min_value, default)
        return default
    return value


def load_settings(
    *,
    db_path: Path | str | None = None,
    roster_cap: int | None = None,
) -> RosterSettings:
    """Build settings from the environment, letting explicit arguments win."""

    resolved_path: Path | str
    if db_path is not None:
        resolved_path = db_path
    else:
        env_db = os.getenv(_DB_PATH_ENV)
        if env_db:
            resolved_path = env_db if env_db == ":memory:" else Path(env_db)
        else:
            resolved_path = Path.cwd() / DEFAULT_DB_FILENAME

    if roster_cap is None:
        roster_cap = _env_int(_ROSTER_CAP_ENV, DEFAULT_ROSTER_CAP, min_value=1)
    elif roster_cap < 1:
        raise ValueError(f"roster_cap must be positive, got {roster_cap!r}")

    return RosterSettings(
        db_path=resolved_path,
        roster_cap=roster_cap,
        db_timeout=_env_float(_DB_TIMEOUT_ENV, DEFAULT_DB_TIMEOUT, clamp_min=0.0),
    )
