from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, Uuid, func
from mentor_admin.db import Base, utcnow

class RaffleDraw(Base):
    __tablename__ = "raffle_draws"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # one draw per year; the unique index is what serializes concurrent draws
    year: Mapped[int] = mapped_column(Integer, unique=True, index=True, nullable=False)
    prize: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    winner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("teens.id", ondelete="RESTRICT"), nullable=False)
    eligible_count: Mapped[int] = mapped_column(Integer, nullable=False)
    drawn_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    drawn_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
