from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, ForeignKey, Uuid, UniqueConstraint, CheckConstraint, func
from mentor_admin.db import Base, utcnow

class Teen(Base):
    __tablename__ = "teens"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

class TeenBadge(Base):
    """
    A teen's record for one badge.
    status:
      - PURCHASED => bought by the teen (counts toward revenue)
      - EARNED    => awarded by staff
    Only PURCHASED records count toward raffle eligibility.
    """
    __tablename__ = "teen_badges"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    teen_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("teens.id", ondelete="CASCADE"), index=True, nullable=False)
    badge_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("badges.id", ondelete="CASCADE"), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PURCHASED")
    purchased_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("teen_id", "badge_id", name="uq_teen_badge_once"),
        CheckConstraint("status IN ('PURCHASED','EARNED')", name="ck_teen_badge_status"),
    )
