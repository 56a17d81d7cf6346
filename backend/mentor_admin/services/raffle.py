from __future__ import annotations
import secrets
from uuid import UUID
import structlog
from sqlalchemy import select, func, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.errors import DrawAlreadyExists, NoEligibleTeens
from mentor_admin.models.challenge import Challenge, Badge
from mentor_admin.models.raffle import RaffleDraw
from mentor_admin.models.teen import Teen, TeenBadge
from mentor_admin.schemas.raffle import EligibleTeen, RaffleDrawCreate, RaffleDrawPublic, RaffleEligibility

log = structlog.get_logger()

_rng = secrets.SystemRandom()


async def required_badge_ids(session: AsyncSession, year: int) -> tuple[int, list[UUID]]:
    """(number of published challenges in the year, ids of their badges)"""
    rows = (await session.execute(
        select(Challenge.id, Badge.id)
        .outerjoin(Badge, Badge.challenge_id == Challenge.id)
        .where(Challenge.year == year, Challenge.is_published.is_(True))
    )).all()
    return len(rows), [badge_id for (_, badge_id) in rows if badge_id is not None]


async def eligible_teens(session: AsyncSession, year: int) -> tuple[int, list[Teen]]:
    """
    Teens holding a purchase record for the badge of every published
    challenge of `year`. Returns (required badge count, teens).

    A published challenge without a badge can't be satisfied by anyone, and a
    year with nothing published has no eligible teens.
    """
    published, badge_ids = await required_badge_ids(session, year)
    if published == 0 or len(badge_ids) < published:
        return published, []

    holders = (
        select(TeenBadge.teen_id)
        .where(TeenBadge.badge_id.in_(badge_ids), TeenBadge.status == "PURCHASED")
        .group_by(TeenBadge.teen_id)
        .having(func.count(func.distinct(TeenBadge.badge_id)) == len(badge_ids))
    )
    teens = (await session.execute(
        select(Teen).where(Teen.id.in_(holders)).order_by(Teen.name.asc(), Teen.id.asc())
    )).scalars().all()
    return published, list(teens)


def _draw_public(draw: RaffleDraw, winner: Teen) -> RaffleDrawPublic:
    return RaffleDrawPublic(
        id=draw.id,
        year=draw.year,
        prize=draw.prize,
        description=draw.description,
        winner=EligibleTeen.model_validate(winner),
        eligible_count=draw.eligible_count,
        drawn_by=draw.drawn_by,
        drawn_at=draw.drawn_at,
    )


async def _draw_for_year(session: AsyncSession, year: int) -> RaffleDrawPublic | None:
    row = (await session.execute(
        select(RaffleDraw, Teen).join(Teen, Teen.id == RaffleDraw.winner_id).where(RaffleDraw.year == year)
    )).first()
    return _draw_public(*row) if row else None


async def get_raffle_eligibility(session: AsyncSession, year: int) -> RaffleEligibility:
    required, teens = await eligible_teens(session, year)
    return RaffleEligibility(
        year=year,
        required_badges=required,
        eligible_count=len(teens),
        eligible_teens=[EligibleTeen.model_validate(t) for t in teens],
        raffle_draw=await _draw_for_year(session, year),
    )


async def _lock_year(session: AsyncSession, year: int) -> None:
    # serializes concurrent draws on PostgreSQL; released at commit/rollback
    if session.get_bind().dialect.name == "postgresql":
        await session.execute(text("SELECT pg_advisory_xact_lock(hashtext(:key))"), {"key": f"raffle:{year}"})


async def create_raffle_draw(session: AsyncSession, payload: RaffleDrawCreate, drawn_by: UUID | None) -> RaffleDrawPublic:
    year = payload.year
    await _lock_year(session, year)

    existing = await session.scalar(select(RaffleDraw.id).where(RaffleDraw.year == year))
    if existing:
        await session.rollback()
        log.warning("raffle_draw_rejected", year=year, code=DrawAlreadyExists.code)
        raise DrawAlreadyExists(f"A raffle has already been drawn for {year}", details={"year": year, "drawId": str(existing)})

    _, teens = await eligible_teens(session, year)
    if not teens:
        await session.rollback()
        log.warning("raffle_draw_rejected", year=year, code=NoEligibleTeens.code)
        raise NoEligibleTeens(f"No teen holds every badge for {year}", details={"year": year})

    winner = _rng.choice(teens)
    draw = RaffleDraw(
        year=year,
        prize=payload.prize,
        description=payload.description,
        winner_id=winner.id,
        eligible_count=len(teens),
        drawn_by=drawn_by,
    )
    session.add(draw)
    try:
        await session.commit()
    except IntegrityError as exc:
        # a concurrent draw won the unique index on raffle_draws.year
        await session.rollback()
        raise DrawAlreadyExists(f"A raffle has already been drawn for {year}", details={"year": year}) from exc

    log.info("raffle_draw_recorded", year=year, draw_id=str(draw.id), winner_id=str(winner.id), eligible_count=len(teens))
    return _draw_public(draw, winner)


async def list_raffle_draws(session: AsyncSession) -> list[RaffleDrawPublic]:
    rows = (await session.execute(
        select(RaffleDraw, Teen).join(Teen, Teen.id == RaffleDraw.winner_id).order_by(RaffleDraw.year.desc())
    )).all()
    return [_draw_public(d, t) for (d, t) in rows]
