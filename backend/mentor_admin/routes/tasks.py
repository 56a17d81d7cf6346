from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.db import get_session
from mentor_admin.schemas.task import TaskCreate, TaskUpdate, TaskPublic, OptionsCheck, OptionsCheckResult
from mentor_admin.services.task_schema import register_task_options
from mentor_admin.services.tasks import create_task, update_task, delete_task, get_task, list_tasks

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.post("", response_model=TaskPublic, status_code=201)
async def create(payload: TaskCreate, session: AsyncSession = Depends(get_session)):
    return await create_task(session, payload)

@router.post("/options/validate", response_model=OptionsCheckResult)
async def validate_options(payload: OptionsCheck):
    """Dry run of option registration: canonical options with ids, nothing stored."""
    return OptionsCheckResult(task_type=payload.task_type, options=register_task_options(payload.task_type, payload.options))

@router.get("/challenge/{challenge_id}", response_model=list[TaskPublic])
async def for_challenge(challenge_id: UUID, session: AsyncSession = Depends(get_session)):
    return await list_tasks(session, challenge_id)

@router.get("/{task_id}", response_model=TaskPublic)
async def get_one(task_id: UUID, session: AsyncSession = Depends(get_session)):
    return await get_task(session, task_id)

@router.put("/{task_id}", response_model=TaskPublic)
async def update(task_id: UUID, payload: TaskUpdate, session: AsyncSession = Depends(get_session)):
    return await update_task(session, task_id, payload)

@router.delete("/{task_id}", status_code=204)
async def delete(task_id: UUID, session: AsyncSession = Depends(get_session)):
    await delete_task(session, task_id)
    return Response(status_code=204)
