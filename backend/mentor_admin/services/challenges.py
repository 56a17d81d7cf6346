from __future__ import annotations
from datetime import datetime, timezone
from uuid import UUID
import structlog
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import utcnow
from mentor_admin.errors import ChallengeNotFound, DuplicateChallenge
from mentor_admin.models.challenge import Challenge, Badge
from mentor_admin.models.task import Task
from mentor_admin.schemas.challenge import ChallengeCreate, ChallengePublic, BadgePublic

log = structlog.get_logger()


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def compute_display_status(ch: Challenge, now: datetime | None = None) -> str:
    """Inactive overrides everything, then Draft, then the go-live/closing window."""
    if not ch.is_active:
        return "Inactive"
    if not ch.is_published:
        return "Draft"
    now = _as_utc(now or utcnow())
    if now < _as_utc(ch.go_live_date):
        return "Scheduled"
    if now <= _as_utc(ch.closing_date):
        return "Active"
    return "Completed"


async def to_public(session: AsyncSession, ch: Challenge) -> ChallengePublic:
    badge = await session.scalar(select(Badge).where(Badge.challenge_id == ch.id))
    task_count = await session.scalar(
        select(func.count()).select_from(Task).where(Task.challenge_id == ch.id)
    ) or 0
    return ChallengePublic(
        id=ch.id,
        year=ch.year,
        month=ch.month,
        theme=ch.theme,
        instructions=ch.instructions,
        go_live_date=ch.go_live_date,
        closing_date=ch.closing_date,
        is_published=ch.is_published,
        published_at=ch.published_at,
        is_active=ch.is_active,
        created_at=ch.created_at,
        display_status=compute_display_status(ch),
        task_count=int(task_count),
        badge=BadgePublic.model_validate(badge) if badge else None,
    )


async def get_challenge(session: AsyncSession, challenge_id: UUID, for_update: bool = False) -> Challenge:
    ch = await session.get(Challenge, challenge_id, with_for_update=for_update or None)
    if not ch:
        raise ChallengeNotFound("Challenge not found", details={"challengeId": str(challenge_id)})
    return ch


async def create_challenge(session: AsyncSession, payload: ChallengeCreate, created_by: UUID | None) -> Challenge:
    taken = await session.scalar(
        select(Challenge.id).where(Challenge.year == payload.year, Challenge.month == payload.month)
    )
    if taken:
        raise DuplicateChallenge(
            f"A challenge already exists for {payload.year}-{payload.month:02d}",
            details={"year": payload.year, "month": payload.month, "challengeId": str(taken)},
        )
    ch = Challenge(
        year=payload.year,
        month=payload.month,
        theme=payload.theme,
        instructions=payload.instructions,
        go_live_date=payload.go_live_date,
        closing_date=payload.closing_date,
        is_published=False,
        is_active=True,
        created_by=created_by,
    )
    session.add(ch)
    try:
        await session.commit()
    except IntegrityError as exc:
        # lost a race on uq_challenge_year_month
        await session.rollback()
        raise DuplicateChallenge(
            f"A challenge already exists for {payload.year}-{payload.month:02d}",
            details={"year": payload.year, "month": payload.month},
        ) from exc
    log.info("challenge_created", challenge_id=str(ch.id), year=ch.year, month=ch.month)
    return ch


async def list_challenges(session: AsyncSession, year: int | None = None) -> list[Challenge]:
    q = select(Challenge)
    if year is not None:
        q = q.where(Challenge.year == year)
    q = q.order_by(Challenge.year.desc(), Challenge.month.asc())
    return list((await session.execute(q)).scalars().all())
