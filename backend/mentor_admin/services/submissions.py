from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.errors import TaskNotFound, TeenNotFound, SubmissionNotFound, MissingContent
from mentor_admin.models.submission import Submission
from mentor_admin.models.task import Task
from mentor_admin.models.teen import Teen
from mentor_admin.schemas.submission import (
    SubmissionCreate, SubmissionPublic, SubmissionListItem, SubmissionDetail, TeenSummary,
)
from mentor_admin.schemas.task import TaskSummary
from mentor_admin.services.content import validate_submission_content

log = structlog.get_logger()


async def create_submission(session: AsyncSession, payload: SubmissionCreate) -> Submission:
    """Teen intake: content is checked against the task before it is stored as PENDING."""
    task = await session.get(Task, payload.task_id)
    if not task:
        raise TaskNotFound("Task not found", details={"taskId": str(payload.task_id)})
    teen = await session.get(Teen, payload.teen_id)
    if not teen:
        raise TeenNotFound("Teen not found", details={"teenId": str(payload.teen_id)})

    validate_submission_content(task.task_type, payload.content, task.options)

    s = Submission(
        task_id=task.id,
        teen_id=teen.id,
        content=payload.content,
        file_urls=list(payload.file_urls),
        status="PENDING",
    )
    session.add(s)
    await session.commit()
    log.info("submission_created", submission_id=str(s.id), task_id=str(task.id), teen_id=str(teen.id))
    return s


def _list_item(s: Submission, task: Task, teen: Teen) -> SubmissionListItem:
    return SubmissionListItem(
        **SubmissionPublic.model_validate(s).model_dump(),
        task=TaskSummary.model_validate(task),
        teen=TeenSummary.model_validate(teen),
    )


async def list_review_queue(
    session: AsyncSession,
    status: str = "PENDING",
    challenge_id: UUID | None = None,
    task_id: UUID | None = None,
    limit: int = 20,
) -> list[SubmissionListItem]:
    q = (
        select(Submission, Task, Teen)
        .join(Task, Task.id == Submission.task_id)
        .join(Teen, Teen.id == Submission.teen_id)
    )
    if status != "all":
        q = q.where(Submission.status == status)
    if challenge_id:
        q = q.where(Task.challenge_id == challenge_id)
    if task_id:
        q = q.where(Submission.task_id == task_id)
    q = q.order_by(Submission.submitted_at.desc()).limit(limit)
    rows = (await session.execute(q)).all()
    return [_list_item(s, task, teen) for (s, task, teen) in rows]


async def get_submission_detail(session: AsyncSession, submission_id: UUID) -> SubmissionDetail:
    row = (await session.execute(
        select(Submission, Task, Teen)
        .join(Task, Task.id == Submission.task_id)
        .join(Teen, Teen.id == Submission.teen_id)
        .where(Submission.id == submission_id)
    )).first()
    if not row:
        raise SubmissionNotFound("Submission not found", details={"submissionId": str(submission_id)})
    s, task, teen = row
    item = _list_item(s, task, teen)

    # stored content predates any later edit of the task, so render what we can
    rendered, content_error = None, None
    try:
        rendered = validate_submission_content(task.task_type, s.content, task.options)
    except MissingContent as exc:
        content_error = exc.message
    return SubmissionDetail(**item.model_dump(), rendered=rendered, content_error=content_error)
