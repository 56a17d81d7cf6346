from __future__ import annotations
from pydantic import Field
from uuid import UUID
from datetime import datetime
from mentor_admin.schemas.base import CamelModel


class EligibleTeen(CamelModel):
    id: UUID
    name: str
    email: str


class RaffleDrawCreate(CamelModel):
    year: int = Field(ge=2000, le=2100)
    prize: str = Field(min_length=3, max_length=200)
    description: str | None = None


class RaffleDrawPublic(CamelModel):
    id: UUID
    year: int
    prize: str
    description: str | None = None
    winner: EligibleTeen
    eligible_count: int
    drawn_by: UUID | None = None
    drawn_at: datetime


class RaffleEligibility(CamelModel):
    year: int
    required_badges: int
    eligible_count: int
    eligible_teens: list[EligibleTeen] = Field(default_factory=list)
    raffle_draw: RaffleDrawPublic | None = None
