from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.errors import TaskNotFound, ScoreOutOfRange
from mentor_admin.models.submission import Submission
from mentor_admin.models.task import Task
from mentor_admin.schemas.task import TaskCreate, TaskUpdate
from mentor_admin.services.challenges import get_challenge
from mentor_admin.services.task_schema import register_task_options

log = structlog.get_logger()


async def get_task(session: AsyncSession, task_id: UUID) -> Task:
    task = await session.get(Task, task_id)
    if not task:
        raise TaskNotFound("Task not found", details={"taskId": str(task_id)})
    return task


async def create_task(session: AsyncSession, payload: TaskCreate) -> Task:
    ch = await get_challenge(session, payload.challenge_id)
    task = Task(
        challenge_id=ch.id,
        tab_name=payload.tab_name,
        title=payload.title,
        description=payload.description,
        task_type=payload.task_type,
        options=register_task_options(payload.task_type, payload.options),
        is_required=payload.is_required,
        completion_rule=payload.completion_rule,
        max_score=payload.max_score,
        due_date=payload.due_date,
    )
    session.add(task)
    await session.commit()
    log.info("task_created", task_id=str(task.id), challenge_id=str(ch.id), task_type=task.task_type)
    return task


async def update_task(session: AsyncSession, task_id: UUID, payload: TaskUpdate) -> Task:
    """
    Partial update. Options go back through the registry whenever the type or
    the options change; ids already present on items are kept as they are.
    """
    task = await get_task(session, task_id)
    changes = payload.model_dump(exclude_unset=True)

    new_max = changes.get("max_score")
    if new_max is not None and new_max < task.max_score:
        # recorded scores must stay within the task's range
        top = await session.scalar(select(func.max(Submission.score)).where(Submission.task_id == task.id))
        if top is not None and top > new_max:
            log.warning("task_update_rejected", task_id=str(task.id), max_score=new_max, highest_score=top)
            raise ScoreOutOfRange(
                f"maxScore {new_max} is below a recorded score of {top}",
                details={"maxScore": new_max, "highestScore": top},
            )

    new_type = changes.pop("task_type", None) or task.task_type
    if "options" in changes or new_type != task.task_type:
        # a type change without new options starts from an empty document
        raw = changes.pop("options", None)
        task.options = register_task_options(new_type, raw)
        task.task_type = new_type

    for field, value in changes.items():
        if value is None and field in ("tab_name", "title", "is_required", "completion_rule", "max_score"):
            continue  # non-nullable columns: null means unchanged
        setattr(task, field, value)

    await session.commit()
    log.info("task_updated", task_id=str(task.id), fields=sorted(payload.model_fields_set))
    return task


async def delete_task(session: AsyncSession, task_id: UUID) -> None:
    task = await get_task(session, task_id)
    await session.delete(task)
    await session.commit()
    log.info("task_deleted", task_id=str(task_id))


async def list_tasks(session: AsyncSession, challenge_id: UUID) -> list[Task]:
    await get_challenge(session, challenge_id)
    q = select(Task).where(Task.challenge_id == challenge_id).order_by(Task.created_at.asc(), Task.id.asc())
    return list((await session.execute(q)).scalars().all())
