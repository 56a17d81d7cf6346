from __future__ import annotations
from pydantic import Field
from typing import Any, Literal
from uuid import UUID
from datetime import datetime
from mentor_admin.schemas.base import CamelModel
from mentor_admin.schemas.task import TaskType, TaskSummary

SubmissionStatus = Literal["PENDING", "APPROVED", "REJECTED"]
QueueFilter = Literal["PENDING", "APPROVED", "REJECTED", "all"]


class SubmissionCreate(CamelModel):
    task_id: UUID
    teen_id: UUID
    content: Any = None
    file_urls: list[str] = Field(default_factory=list)


class SubmissionPublic(CamelModel):
    id: UUID
    task_id: UUID
    teen_id: UUID
    content: Any = None
    file_urls: list[str] = Field(default_factory=list)
    status: SubmissionStatus
    score: int | None = None
    review_note: str | None = None
    reviewed_by: UUID | None = None
    submitted_at: datetime
    reviewed_at: datetime | None = None


class ReviewRequest(CamelModel):
    # status is checked by the review service so a bad value surfaces as INVALID_STATUS
    status: str
    score: int | None = None
    review_note: str | None = None


class ContentEntry(CamelModel):
    label: str
    value: Any = None


class CanonicalContent(CamelModel):
    task_type: TaskType
    entries: list[ContentEntry] = Field(default_factory=list)
    is_empty: bool = False


class ContentCheck(CamelModel):
    task_type: TaskType
    content: Any = None
    options: dict | None = None


class TeenSummary(CamelModel):
    id: UUID
    name: str
    email: str


class SubmissionListItem(SubmissionPublic):
    task: TaskSummary
    teen: TeenSummary


class SubmissionDetail(SubmissionListItem):
    rendered: CanonicalContent | None = None
    content_error: str | None = None
