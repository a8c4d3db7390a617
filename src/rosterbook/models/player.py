"""Canonical player model shared by storage, session and API layers."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


# Largest value SQLite stores in an INTEGER column.
MAX_STORED_INT = 2**63 - 1


class PlayerRecord(BaseModel):
    """One roster entry. ``id`` is assigned by the store on insert."""

    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    playing_style: str = Field(..., min_length=1)
    value: Optional[int] = Field(default=None, gt=0, le=MAX_STORED_INT)

    model_config = ConfigDict(frozen=True)

    def with_id(self, record_id: int) -> "PlayerRecord":
        return self.model_copy(update={"id": record_id})

    def same_fields(self, other: "PlayerRecord") -> bool:
        """Compare everything except the store-assigned id."""

        return self.model_dump(exclude={"id"}) == other.model_dump(exclude={"id"})
