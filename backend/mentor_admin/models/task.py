from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, DateTime, Text, ForeignKey, Uuid, CheckConstraint, func
from mentor_admin.db import Base, JSONDoc, utcnow

class Task(Base):
    __tablename__ = "tasks"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    challenge_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("challenges.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tab_name: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    task_type: Mapped[str] = mapped_column(String(16), nullable=False)  # TEXT|IMAGE|VIDEO|QUIZ|FORM|PICK_ONE|CHECKLIST
    # shape dictated by task_type, see services.task_schema
    options: Mapped[dict | None] = mapped_column(JSONDoc, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completion_rule: Mapped[str] = mapped_column(Text(), nullable=False, default="Complete this task")
    max_score: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("max_score >= 0", name="ck_task_max_score"),
        CheckConstraint(
            "task_type IN ('TEXT','IMAGE','VIDEO','QUIZ','FORM','PICK_ONE','CHECKLIST')",
            name="ck_task_type",
        ),
    )
