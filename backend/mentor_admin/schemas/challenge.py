from __future__ import annotations
from pydantic import Field, model_validator
from typing import Literal
from uuid import UUID
from datetime import datetime
from mentor_admin.schemas.base import CamelModel

DisplayStatus = Literal["Draft", "Scheduled", "Active", "Completed", "Inactive"]
ToggleField = Literal["isPublished", "isActive"]
TeenBadgeStatus = Literal["PURCHASED", "EARNED"]


class ChallengeCreate(CamelModel):
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    theme: str = Field(min_length=3, max_length=160)
    instructions: str | None = None
    go_live_date: datetime
    closing_date: datetime

    @model_validator(mode="after")
    def window_order(self):
        if self.closing_date <= self.go_live_date:
            raise ValueError("closingDate must be after goLiveDate")
        return self


class ToggleRequest(CamelModel):
    field: ToggleField


class BadgeCreate(CamelModel):
    challenge_id: UUID
    name: str = Field(min_length=1, max_length=120)
    description: str | None = None
    image_url: str | None = None
    price: int = Field(default=0, ge=0)
    is_active: bool = True


class BadgePublic(CamelModel):
    id: UUID
    challenge_id: UUID
    name: str
    description: str | None = None
    image_url: str | None = None
    price: int
    is_active: bool
    created_at: datetime


class ChallengePublic(CamelModel):
    id: UUID
    year: int
    month: int
    theme: str
    instructions: str | None = None
    go_live_date: datetime
    closing_date: datetime
    is_published: bool
    published_at: datetime | None = None
    is_active: bool
    created_at: datetime
    display_status: DisplayStatus
    task_count: int = 0
    badge: BadgePublic | None = None


class BadgeStatusBreakdown(CamelModel):
    purchased: int = 0
    earned: int = 0


class BadgeStats(CamelModel):
    total_badges: int = 0
    status_breakdown: BadgeStatusBreakdown = Field(default_factory=BadgeStatusBreakdown)
    total_revenue: int = 0
