from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PlayerResponse(BaseModel):
    id: int
    name: str
    position: str
    playing_style: str
    value: int | None


class RosterStatsResponse(BaseModel):
    total_value: int
    remaining: int | None
    remaining_slots: int
    average: int | None


class RosterResponse(BaseModel):
    players: List[PlayerResponse]
    stats: RosterStatsResponse
    target: int | None
    roster_cap: int = Field(..., ge=1)
