from __future__ import annotations
from collections import defaultdict
from typing import Iterable
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.errors import ChallengeNotFound
from mentor_admin.models.challenge import Challenge, Badge
from mentor_admin.models.submission import Submission
from mentor_admin.models.task import Task
from mentor_admin.models.teen import TeenBadge
from mentor_admin.schemas.analytics import (
    ChallengeStats, ChallengeRef, ChallengeAnalytics, AnalyticsRollup, AnalyticsOverview,
)
from mentor_admin.schemas.challenge import BadgeStats, BadgeStatusBreakdown

# (label, lo, hi): half-open [lo, hi); "100" is the singleton for complete teens
PROGRESS_BUCKETS: tuple[tuple[str, float, float], ...] = (
    ("0-25", 0, 25),
    ("25-50", 25, 50),
    ("50-75", 50, 75),
    ("75-99", 75, 100),
)
COMPLETE_BUCKET = "100"


def empty_distribution() -> dict[str, int]:
    dist = {label: 0 for (label, _, _) in PROGRESS_BUCKETS}
    dist[COMPLETE_BUCKET] = 0
    return dist


def progress_bucket(progress: float) -> str:
    if progress >= 100:
        return COMPLETE_BUCKET
    for label, lo, hi in PROGRESS_BUCKETS:
        if lo <= progress < hi:
            return label
    return PROGRESS_BUCKETS[0][0]


def required_task_ids(tasks: Iterable[Task]) -> set[UUID]:
    """Tasks flagged isRequired; when none are flagged every task counts."""
    tasks = list(tasks)
    flagged = {t.id for t in tasks if t.is_required}
    return flagged or {t.id for t in tasks}


def compute_challenge_stats(tasks: Iterable[Task], submissions: Iterable[Submission]) -> ChallengeStats:
    """
    Pure aggregation for one challenge.

    `submissions` may include rows for tasks outside `tasks`; those are ignored.
    A teen participates with at least one submission on any of the tasks, and
    completes when every required task has an APPROVED submission.
    """
    tasks = list(tasks)
    task_ids = {t.id for t in tasks}
    required = required_task_ids(tasks)

    approved: dict[UUID, set[UUID]] = defaultdict(set)
    participants: set[UUID] = set()
    for s in submissions:
        if s.task_id not in task_ids:
            continue
        participants.add(s.teen_id)
        if s.status == "APPROVED" and s.task_id in required:
            approved[s.teen_id].add(s.task_id)

    dist = empty_distribution()
    if not participants:
        return ChallengeStats(progress_distribution=dist)

    total_progress = 0.0
    completed = 0
    for teen_id in participants:
        progress = (len(approved[teen_id]) / len(required) * 100) if required else 0.0
        total_progress += progress
        if progress >= 100:
            completed += 1
        dist[progress_bucket(progress)] += 1

    n = len(participants)
    return ChallengeStats(
        total_participants=n,
        completed_count=completed,
        average_progress=round(total_progress / n, 2),
        completion_rate=round(completed / n * 100, 2),
        progress_distribution=dist,
    )


def rollup(entries: list[ChallengeAnalytics]) -> AnalyticsRollup:
    dist = empty_distribution()
    participants = completed = 0
    for e in entries:
        participants += e.stats.total_participants
        completed += e.stats.completed_count
        for label, count in e.stats.progress_distribution.items():
            dist[label] = dist.get(label, 0) + count
    avg = sum(e.stats.average_progress for e in entries) / len(entries) if entries else 0.0
    return AnalyticsRollup(
        total_challenges=len(entries),
        total_participants=participants,
        total_completed=completed,
        overall_completion=round(completed / participants * 100, 2) if participants else 0.0,
        avg_progress=round(avg, 2),
        progress_distribution=dist,
    )


async def _stats_for(session: AsyncSession, ch: Challenge) -> ChallengeAnalytics:
    tasks = (await session.execute(select(Task).where(Task.challenge_id == ch.id))).scalars().all()
    subs = []
    if tasks:
        subs = (await session.execute(
            select(Submission).where(Submission.task_id.in_([t.id for t in tasks]))
        )).scalars().all()
    return ChallengeAnalytics(
        challenge=ChallengeRef(id=ch.id, year=ch.year, month=ch.month, theme=ch.theme, total_tasks=len(tasks)),
        stats=compute_challenge_stats(tasks, subs),
    )


async def get_challenge_stats(session: AsyncSession, challenge_id: UUID) -> ChallengeAnalytics:
    ch = await session.get(Challenge, challenge_id)
    if not ch:
        raise ChallengeNotFound("Challenge not found", details={"challengeId": str(challenge_id)})
    return await _stats_for(session, ch)


async def get_analytics_overview(session: AsyncSession, year: int, month: int | None = None) -> AnalyticsOverview:
    q = select(Challenge).where(Challenge.year == year, Challenge.is_published.is_(True))
    if month is not None:
        q = q.where(Challenge.month == month)
    challenges = (await session.execute(q.order_by(Challenge.month.asc()))).scalars().all()
    data = [await _stats_for(session, ch) for ch in challenges]
    return AnalyticsOverview(year=year, month=month, data=data, rollup=rollup(data))


async def get_badge_stats(session: AsyncSession, year: int | None = None) -> BadgeStats:
    q = (
        select(TeenBadge.status, func.count(TeenBadge.id), func.coalesce(func.sum(Badge.price), 0))
        .join(Badge, Badge.id == TeenBadge.badge_id)
        .group_by(TeenBadge.status)
    )
    if year is not None:
        q = q.join(Challenge, Challenge.id == Badge.challenge_id).where(Challenge.year == year)
    counts = {status: (int(n), int(revenue)) for (status, n, revenue) in (await session.execute(q)).all()}
    purchased, revenue = counts.get("PURCHASED", (0, 0))
    earned, _ = counts.get("EARNED", (0, 0))
    return BadgeStats(
        total_badges=purchased + earned,
        status_breakdown=BadgeStatusBreakdown(purchased=purchased, earned=earned),
        total_revenue=revenue,
    )
