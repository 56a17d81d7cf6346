from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import get_session
from mentor_admin.staff_deps import get_staff_id
from mentor_admin.schemas.challenge import ChallengeCreate, ChallengePublic, ToggleRequest
from mentor_admin.services.challenges import create_challenge, get_challenge, list_challenges, to_public
from mentor_admin.services.badges import available_challenges, publish_challenge, toggle_challenge

router = APIRouter(prefix="/challenges", tags=["challenges"])

@router.post("", response_model=ChallengePublic, status_code=201)
async def create(payload: ChallengeCreate, session: AsyncSession = Depends(get_session), staff_id=Depends(get_staff_id)):
    ch = await create_challenge(session, payload, staff_id)
    return await to_public(session, ch)

@router.get("", response_model=list[ChallengePublic])
async def list_all(session: AsyncSession = Depends(get_session), year: int | None = Query(default=None, ge=2000, le=2100)):
    return [await to_public(session, ch) for ch in await list_challenges(session, year)]

# declared before /{challenge_id} so the literal path wins
@router.get("/available-for-badge", response_model=list[ChallengePublic])
async def available_for_badge(session: AsyncSession = Depends(get_session)):
    return [await to_public(session, ch) for ch in await available_challenges(session)]

@router.get("/{challenge_id}", response_model=ChallengePublic)
async def get_one(challenge_id: UUID, session: AsyncSession = Depends(get_session)):
    return await to_public(session, await get_challenge(session, challenge_id))

@router.patch("/{challenge_id}/publish", response_model=ChallengePublic)
async def publish(challenge_id: UUID, session: AsyncSession = Depends(get_session)):
    ch = await publish_challenge(session, challenge_id)
    return await to_public(session, ch)

@router.patch("/{challenge_id}/toggle", response_model=ChallengePublic)
async def toggle(challenge_id: UUID, payload: ToggleRequest, session: AsyncSession = Depends(get_session)):
    ch = await toggle_challenge(session, challenge_id, payload.field)
    return await to_public(session, ch)
