from __future__ import annotations
from pydantic import Field
from uuid import UUID
from mentor_admin.schemas.base import CamelModel


class ChallengeStats(CamelModel):
    total_participants: int = 0
    completed_count: int = 0
    average_progress: float = 0.0
    completion_rate: float = 0.0
    # keys "0-25", "25-50", "50-75", "75-99", "100"; always all present
    progress_distribution: dict[str, int] = Field(default_factory=dict)


class ChallengeRef(CamelModel):
    id: UUID
    year: int
    month: int
    theme: str
    total_tasks: int = 0


class ChallengeAnalytics(CamelModel):
    challenge: ChallengeRef
    stats: ChallengeStats


class AnalyticsRollup(CamelModel):
    total_challenges: int = 0
    total_participants: int = 0
    total_completed: int = 0
    overall_completion: float = 0.0
    avg_progress: float = 0.0
    progress_distribution: dict[str, int] = Field(default_factory=dict)


class AnalyticsOverview(CamelModel):
    year: int
    month: int | None = None
    data: list[ChallengeAnalytics] = Field(default_factory=list)
    rollup: AnalyticsRollup
