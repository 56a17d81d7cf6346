from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from mentor_admin.config import settings
from mentor_admin.db import utcnow
from mentor_admin.errors import InvalidStatus, ScoreOutOfRange, NoteTooLong, SubmissionNotFound, TaskNotFound
from mentor_admin.models.submission import Submission
from mentor_admin.models.task import Task
from mentor_admin.schemas.submission import ReviewRequest

log = structlog.get_logger()

# PENDING is only ever the initial state; a review always lands on one of these
REVIEWABLE_STATUSES = ("APPROVED", "REJECTED")


def check_review(status: str, score: int | None, review_note: str | None, max_score: int,
                 max_note_length: int | None = None) -> None:
    """Raise the first rule a review request breaks. Pure."""
    if max_note_length is None:
        max_note_length = settings.max_review_note_length
    if status not in REVIEWABLE_STATUSES:
        raise InvalidStatus(
            f"Status must be one of {', '.join(REVIEWABLE_STATUSES)}",
            details={"received": status, "allowed": list(REVIEWABLE_STATUSES)},
        )
    if score is not None and not (0 <= score <= max_score):
        raise ScoreOutOfRange(
            f"Score must be between 0 and {max_score}",
            details={"score": score, "min": 0, "max": max_score},
        )
    if review_note and len(review_note) > max_note_length:
        raise NoteTooLong(
            f"Review note exceeds {max_note_length} characters",
            details={"length": len(review_note), "max": max_note_length},
        )


def apply_review(s: Submission, status: str, score: int | None, review_note: str | None, reviewer_id: UUID | None) -> None:
    """
    Partial update: status, reviewer and timestamp are always written; score
    and note only when supplied (an empty note counts as not supplied), so a
    quick approve/reject never erases earlier review metadata.
    """
    s.status = status
    if score is not None:
        s.score = score
    if review_note:
        s.review_note = review_note
    s.reviewed_by = reviewer_id
    s.reviewed_at = utcnow()


async def review_submission(session: AsyncSession, submission_id: UUID, payload: ReviewRequest,
                            reviewer_id: UUID | None) -> Submission:
    # row lock so two reviewers can't interleave status/score/note
    s = await session.get(Submission, submission_id, with_for_update=True, populate_existing=True)
    if not s:
        raise SubmissionNotFound("Submission not found", details={"submissionId": str(submission_id)})
    task = await session.get(Task, s.task_id)
    if not task:
        raise TaskNotFound("Task for submission not found", details={"taskId": str(s.task_id)})

    try:
        check_review(payload.status, payload.score, payload.review_note, task.max_score)
    except (InvalidStatus, ScoreOutOfRange, NoteTooLong) as exc:
        await session.rollback()
        log.warning("review_rejected", submission_id=str(submission_id), code=exc.code, details=exc.details)
        raise

    previous = s.status
    apply_review(s, payload.status, payload.score, payload.review_note, reviewer_id)
    await session.commit()
    log.info(
        "submission_reviewed",
        submission_id=str(s.id),
        task_id=str(s.task_id),
        from_status=previous,
        to_status=s.status,
        score=s.score,
        reviewer_id=str(reviewer_id) if reviewer_id else None,
    )
    return s
