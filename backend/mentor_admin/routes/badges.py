from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import get_session
from mentor_admin.schemas.challenge import BadgeCreate, BadgePublic, BadgeStats
from mentor_admin.services.analytics import get_badge_stats
from mentor_admin.services.badges import create_badge

router = APIRouter(prefix="/badges", tags=["badges"])

@router.post("", response_model=BadgePublic, status_code=201)
async def create(payload: BadgeCreate, session: AsyncSession = Depends(get_session)):
    return await create_badge(session, payload)

@router.get("/stats", response_model=BadgeStats)
async def stats(session: AsyncSession = Depends(get_session), year: int | None = Query(default=None, ge=2000, le=2100)):
    return await get_badge_stats(session, year)
