from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import utcnow
from mentor_admin.errors import DuplicateBadge, BadgeRequired
from mentor_admin.models.challenge import Challenge, Badge
from mentor_admin.schemas.challenge import BadgeCreate
from mentor_admin.services.challenges import get_challenge

log = structlog.get_logger()


async def _existing_badge(session: AsyncSession, challenge_id: UUID) -> UUID | None:
    return await session.scalar(select(Badge.id).where(Badge.challenge_id == challenge_id))


async def create_badge(session: AsyncSession, payload: BadgeCreate) -> Badge:
    """One badge per challenge: checked up front, enforced by the unique FK."""
    ch = await get_challenge(session, payload.challenge_id)
    existing = await _existing_badge(session, ch.id)
    if existing:
        log.warning("badge_rejected", challenge_id=str(ch.id), code=DuplicateBadge.code)
        raise DuplicateBadge(
            "Challenge already has a badge",
            details={"challengeId": str(ch.id), "badgeId": str(existing)},
        )

    badge = Badge(
        challenge_id=ch.id,
        name=payload.name,
        description=payload.description,
        image_url=payload.image_url,
        price=payload.price,
        is_active=payload.is_active,
    )
    session.add(badge)
    try:
        await session.commit()
    except IntegrityError as exc:
        # a concurrent create won the unique index on badges.challenge_id
        await session.rollback()
        log.warning("badge_rejected", challenge_id=str(payload.challenge_id), code=DuplicateBadge.code)
        raise DuplicateBadge(
            "Challenge already has a badge",
            details={"challengeId": str(payload.challenge_id)},
        ) from exc
    log.info("badge_created", badge_id=str(badge.id), challenge_id=str(payload.challenge_id), price=badge.price)
    return badge


async def available_challenges(session: AsyncSession) -> list[Challenge]:
    """Challenges that can still receive a badge."""
    has_badge = select(Badge.challenge_id)
    q = (
        select(Challenge)
        .where(Challenge.id.not_in(has_badge))
        .order_by(Challenge.year.desc(), Challenge.month.asc())
    )
    return list((await session.execute(q)).scalars().all())


async def _require_badge(session: AsyncSession, ch: Challenge) -> None:
    if not await session.scalar(select(Badge.id).where(Badge.challenge_id == ch.id)):
        log.warning("publish_rejected", challenge_id=str(ch.id), code=BadgeRequired.code)
        raise BadgeRequired(
            "Challenge needs a badge before it can be published",
            details={"challengeId": str(ch.id)},
        )


async def publish_challenge(session: AsyncSession, challenge_id: UUID) -> Challenge:
    ch = await get_challenge(session, challenge_id, for_update=True)
    await _require_badge(session, ch)
    if ch.is_published:
        return ch
    ch.is_published = True
    ch.published_at = utcnow()
    await session.commit()
    log.info("challenge_published", challenge_id=str(ch.id), year=ch.year, month=ch.month)
    return ch


async def toggle_challenge(session: AsyncSession, challenge_id: UUID, field: str) -> Challenge:
    """Flip isPublished or isActive. Publishing this way still needs a badge."""
    ch = await get_challenge(session, challenge_id, for_update=True)
    if field == "isPublished":
        if not ch.is_published:
            return await publish_challenge(session, challenge_id)
        ch.is_published = False
        ch.published_at = None
    elif field == "isActive":
        ch.is_active = not ch.is_active
    else:
        raise ValueError(f"cannot toggle {field!r}")
    await session.commit()
    log.info("challenge_toggled", challenge_id=str(ch.id), field=field,
             is_published=ch.is_published, is_active=ch.is_active)
    return ch
