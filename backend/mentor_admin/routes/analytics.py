from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import get_session
from mentor_admin.schemas.analytics import ChallengeAnalytics, AnalyticsOverview
from mentor_admin.services.analytics import get_challenge_stats, get_analytics_overview

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.get("/challenges/{challenge_id}", response_model=ChallengeAnalytics)
async def challenge_stats(challenge_id: UUID, session: AsyncSession = Depends(get_session)):
    return await get_challenge_stats(session, challenge_id)

@router.get("/overview", response_model=AnalyticsOverview)
async def overview(
    session: AsyncSession = Depends(get_session),
    year: int = Query(..., ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
):
    return await get_analytics_overview(session, year, month)
