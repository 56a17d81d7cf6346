from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "challenges",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("theme", sa.String(length=160), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("go_live_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("closing_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("year", "month", name="uq_challenge_year_month"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_challenge_month"),
    )
    op.create_index("ix_challenges_year", "challenges", ["year"])

    op.create_table(
        "badges",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("challenge_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_badge_price_non_negative"),
    )
    # one badge per challenge
    op.create_index("ix_badges_challenge_id", "badges", ["challenge_id"], unique=True)

    op.create_table(
        "tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("challenge_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tab_name", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("task_type", sa.String(length=16), nullable=False),
        sa.Column("options", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completion_rule", sa.Text(), nullable=False, server_default="Complete this task"),
        sa.Column("max_score", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("due_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("max_score >= 0", name="ck_task_max_score"),
        sa.CheckConstraint(
            "task_type IN ('TEXT','IMAGE','VIDEO','QUIZ','FORM','PICK_ONE','CHECKLIST')",
            name="ck_task_type",
        ),
    )
    op.create_index("ix_tasks_challenge_id", "tasks", ["challenge_id"])

    op.create_table(
        "teens",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_teens_email", "teens", ["email"], unique=True)

    op.create_table(
        "teen_badges",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("teen_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teens.id", ondelete="CASCADE"), nullable=False),
        sa.Column("badge_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("badges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="PURCHASED"),
        sa.Column("purchased_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("teen_id", "badge_id", name="uq_teen_badge_once"),
        sa.CheckConstraint("status IN ('PURCHASED','EARNED')", name="ck_teen_badge_status"),
    )
    op.create_index("ix_teen_badges_teen_id", "teen_badges", ["teen_id"])
    op.create_index("ix_teen_badges_badge_id", "teen_badges", ["badge_id"])

    op.create_table(
        "submissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("teen_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teens.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("file_urls", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="PENDING"),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("submitted_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('PENDING','APPROVED','REJECTED')", name="ck_submission_status"),
        sa.CheckConstraint("score IS NULL OR score >= 0", name="ck_submission_score_non_negative"),
    )
    op.create_index("ix_submissions_task_id", "submissions", ["task_id"])
    op.create_index("ix_submissions_teen_id", "submissions", ["teen_id"])
    op.create_index("ix_submissions_status_submitted_at", "submissions", ["status", "submitted_at"])

    op.create_table(
        "raffle_draws",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("prize", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("winner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("teens.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("eligible_count", sa.Integer(), nullable=False),
        sa.Column("drawn_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("drawn_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    # one draw per year
    op.create_index("ix_raffle_draws_year", "raffle_draws", ["year"], unique=True)

def downgrade() -> None:
    op.drop_index("ix_raffle_draws_year", table_name="raffle_draws")
    op.drop_table("raffle_draws")
    op.drop_index("ix_submissions_status_submitted_at", table_name="submissions")
    op.drop_index("ix_submissions_teen_id", table_name="submissions")
    op.drop_index("ix_submissions_task_id", table_name="submissions")
    op.drop_table("submissions")
    op.drop_index("ix_teen_badges_badge_id", table_name="teen_badges")
    op.drop_index("ix_teen_badges_teen_id", table_name="teen_badges")
    op.drop_table("teen_badges")
    op.drop_index("ix_teens_email", table_name="teens")
    op.drop_table("teens")
    op.drop_index("ix_tasks_challenge_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_badges_challenge_id", table_name="badges")
    op.drop_table("badges")
    op.drop_index("ix_challenges_year", table_name="challenges")
    op.drop_table("challenges")
