"""CSV export of the current roster."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from rosterbook.config.positions import position_label
from rosterbook.models import PlayerRecord


EXPORT_HEADERS = ("id", "name", "position", "position_label", "playing_style", "value")


def export_roster_to_csv(records: Sequence[PlayerRecord]) -> str:
    """Render records as CSV in the order given."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for record in records:
        writer.writerow([
            record.id,
            record.name,
            record.position,
            position_label(record.position),
            record.playing_style,
            "" if record.value is None else record.value,
        ])
    return buffer.getvalue()


__all__ = ["EXPORT_HEADERS", "export_roster_to_csv"]
