"""Baseline migration - startups, users, partnerships, jobs, notifications

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates the founder roster tables, the partnership ledger and the job
outbox. Uses portable column types so the same migration runs on
PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create registry tables."""

    # ==========================================================================
    # Startups
    # ==========================================================================
    op.create_table(
        "startups",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("approval_status", sa.String(20), nullable=True),
        sa.Column("registration_type", sa.String(30), server_default=sa.text("'none'"), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("district", sa.String(100), nullable=True),
        sa.Column("pitch", sa.Text(), nullable=True),
        sa.Column("total_shares", sa.Integer(), nullable=True),
        *_timestamps(),
    )

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("fullname", sa.String(255), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("startup_id", sa.Uuid(), sa.ForeignKey("startups.id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "pending_startup_id", sa.Uuid(), sa.ForeignKey("startups.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("invitation_token", sa.String(100), nullable=True, unique=True),
        sa.Column("startup_link_verifier_id", sa.String(100), nullable=True),
        sa.Column("token_version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "startup_id IS NULL OR pending_startup_id IS NULL",
            name="ck_users_single_startup_relation",
        ),
    )
    op.create_index("idx_users_startup_id", "users", ["startup_id"])
    op.create_index("idx_users_pending_startup_id", "users", ["pending_startup_id"])

    # ==========================================================================
    # Partnerships
    # ==========================================================================
    op.create_table(
        "partnerships",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("startup_id", sa.Uuid(), sa.ForeignKey("startups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("shares", sa.Integer(), nullable=False),
        sa.Column("cash_contribution", sa.Numeric(14, 2), nullable=False),
        sa.Column("salary", sa.Numeric(14, 2), nullable=False),
        sa.Column("managing_director", sa.Boolean(), nullable=False),
        sa.Column("operate_bank_account", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "startup_id", name="uq_partnerships_user_startup"),
    )
    op.create_index("idx_partnerships_startup_position", "partnerships", ["startup_id", "position"])

    # ==========================================================================
    # Jobs (outbox)
    # ==========================================================================
    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("startup_id", sa.Uuid(), sa.ForeignKey("startups.id", ondelete="SET NULL"), nullable=True),
        sa.Column("job_type", sa.String(50), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("run_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("status", sa.String(20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column("attempts", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_attempts", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_jobs_pending", "jobs", ["status", "run_at"])

    # ==========================================================================
    # Notifications
    # ==========================================================================
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("startup_id", sa.Uuid(), sa.ForeignKey("startups.id", ondelete="SET NULL"), nullable=True),
        sa.Column("notification_type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_notifications_user", "notifications", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("jobs")
    op.drop_table("partnerships")
    op.drop_table("users")
    op.drop_table("startups")
