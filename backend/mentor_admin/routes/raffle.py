from __future__ import annotations
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import get_session
from mentor_admin.staff_deps import get_staff_id
from mentor_admin.schemas.raffle import RaffleEligibility, RaffleDrawCreate, RaffleDrawPublic
from mentor_admin.services.raffle import get_raffle_eligibility, create_raffle_draw, list_raffle_draws

router = APIRouter(prefix="/raffle", tags=["raffle"])

@router.get("/eligible/{year}", response_model=RaffleEligibility)
async def eligible(year: int = Path(..., ge=2000, le=2100), session: AsyncSession = Depends(get_session)):
    return await get_raffle_eligibility(session, year)

@router.post("/draw", response_model=RaffleDrawPublic, status_code=201)
async def draw(payload: RaffleDrawCreate, session: AsyncSession = Depends(get_session), staff_id=Depends(get_staff_id)):
    return await create_raffle_draw(session, payload, staff_id)

@router.get("/history", response_model=list[RaffleDrawPublic])
async def history(session: AsyncSession = Depends(get_session)):
    return await list_raffle_draws(session)
