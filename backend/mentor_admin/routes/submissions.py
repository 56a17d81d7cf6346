from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.config import settings
from mentor_admin.db import get_session
from mentor_admin.staff_deps import get_staff_id
from mentor_admin.schemas.submission import (
    SubmissionCreate, SubmissionPublic, SubmissionListItem, SubmissionDetail,
    ReviewRequest, ContentCheck, CanonicalContent, QueueFilter,
)
from mentor_admin.services.content import validate_submission_content
from mentor_admin.services.review import review_submission
from mentor_admin.services.submissions import create_submission, list_review_queue, get_submission_detail

router = APIRouter(prefix="/submissions", tags=["submissions"])

@router.post("", response_model=SubmissionPublic, status_code=201)
async def submit(payload: SubmissionCreate, session: AsyncSession = Depends(get_session)):
    return await create_submission(session, payload)

@router.post("/content/validate", response_model=CanonicalContent)
async def validate_content(payload: ContentCheck):
    return validate_submission_content(payload.task_type, payload.content, payload.options)

@router.get("/review-queue", response_model=list[SubmissionListItem])
async def review_queue(
    session: AsyncSession = Depends(get_session),
    status: QueueFilter = Query(default="PENDING"),
    challenge_id: UUID | None = Query(default=None, alias="challengeId"),
    task_id: UUID | None = Query(default=None, alias="taskId"),
    limit: int = Query(default=20, ge=1, le=settings.review_queue_max_limit),
):
    return await list_review_queue(session, status, challenge_id, task_id, limit)

@router.get("/{submission_id}", response_model=SubmissionDetail)
async def detail(submission_id: UUID, session: AsyncSession = Depends(get_session)):
    return await get_submission_detail(session, submission_id)

@router.patch("/{submission_id}/review", response_model=SubmissionPublic)
async def review(submission_id: UUID, payload: ReviewRequest, session: AsyncSession = Depends(get_session), staff_id=Depends(get_staff_id)):
    return await review_submission(session, submission_id, payload, staff_id)

@router.post("/{submission_id}/approve", response_model=SubmissionPublic)
async def quick_approve(submission_id: UUID, session: AsyncSession = Depends(get_session), staff_id=Depends(get_staff_id)):
    return await review_submission(session, submission_id, ReviewRequest(status="APPROVED"), staff_id)

@router.post("/{submission_id}/reject", response_model=SubmissionPublic)
async def quick_reject(submission_id: UUID, session: AsyncSession = Depends(get_session), staff_id=Depends(get_staff_id)):
    return await review_submission(session, submission_id, ReviewRequest(status="REJECTED"), staff_id)
