from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, Uuid, CheckConstraint, func
from mentor_admin.db import Base, JSONDoc, utcnow


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False
    )
    teen_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("teens.id", ondelete="CASCADE"), index=True, nullable=False
    )

    content: Mapped[dict | None] = mapped_column(JSONDoc, nullable=True)  # shape dictated by the task's type
    file_urls: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")  # PENDING|APPROVED|REJECTED
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text(), nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('PENDING','APPROVED','REJECTED')", name="ck_submission_status"),
        CheckConstraint("score IS NULL OR score >= 0", name="ck_submission_score_non_negative"),
    )
