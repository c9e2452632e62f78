"""SQLAlchemy ORM models for startups, founders, partnerships and the job outbox."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric,
    String, Text, UniqueConstraint, Uuid, func, text
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from venture_registry.db.base import Base
from venture_registry.db.enums import DEFAULT_JOB_STATUS, DEFAULT_REGISTRATION_TYPE


# =============================================================================
# Startup & Founder Models
# =============================================================================

class Startup(Base):
    """
    A venture that founders belong to.

    The founder roster is every user whose startup_id points here.
    Legal fields stay empty until the startup registers.
    """
    __tablename__ = "startups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    approval_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    registration_type: Mapped[str] = mapped_column(
        String(30),
        default=DEFAULT_REGISTRATION_TYPE.value,
        server_default=text(f"'{DEFAULT_REGISTRATION_TYPE.value}'"),
        nullable=False,
    )

    # Legal fields (set at registration)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    district: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pitch: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_shares: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    founders: Mapped[list["User"]] = relationship(
        back_populates="startup",
        foreign_keys="User.startup_id",
        order_by="User.created_at",
    )
    partnerships: Mapped[list["Partnership"]] = relationship(
        back_populates="startup",
        order_by="Partnership.position",
    )


class User(Base):
    """
    A person known to the registry.

    Created by signup, by a cofounder invitation (placeholder with an
    invitation_token) or by registration reconciliation.

    Constraint: startup_id and pending_startup_id are never both set.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "startup_id IS NULL OR pending_startup_id IS NULL",
            name="ck_users_single_startup_relation",
        ),
        Index("idx_users_startup_id", "startup_id"),
        Index("idx_users_pending_startup_id", "pending_startup_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    fullname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)

    startup_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="SET NULL"), nullable=True
    )
    pending_startup_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="SET NULL"), nullable=True
    )

    # Placeholder accounts created by an invitation carry a token until activation
    invitation_token: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    startup_link_verifier_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    token_version: Mapped[int] = mapped_column(
        Integer, default=1, server_default=text("1"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    startup: Mapped["Startup | None"] = relationship(
        back_populates="founders", foreign_keys=[startup_id]
    )
    pending_startup: Mapped["Startup | None"] = relationship(foreign_keys=[pending_startup_id])
    partnerships: Mapped[list["Partnership"]] = relationship(back_populates="user")


class Partnership(Base):
    """
    Legal partnership record created when a startup registers.

    Constraint: UNIQUE(user_id, startup_id) - one partnership per person per startup.
    """
    __tablename__ = "partnerships"
    __table_args__ = (
        UniqueConstraint("user_id", "startup_id", name="uq_partnerships_user_startup"),
        Index("idx_partnerships_startup_position", "startup_id", "position"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    startup_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    shares: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cash_contribution: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0, nullable=False)
    managing_director: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    operate_bank_account: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="partnerships")
    startup: Mapped["Startup"] = relationship(back_populates="partnerships")


# =============================================================================
# Outbox & Notifications
# =============================================================================

class Job(Base):
    """
    Background job for async processing.

    Used for: invitation / cofounder emails and in-app notifications.
    Written in the same transaction as the membership change; the worker
    polls for pending jobs and processes them.
    """
    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_pending", "status", "run_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    startup_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="SET NULL"), nullable=True
    )
    job_type: Mapped[str] = mapped_column(String(50), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    run_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_JOB_STATUS.value,
        server_default=text(f"'{DEFAULT_JOB_STATUS.value}'"),
        nullable=False,
    )
    attempts: Mapped[int] = mapped_column(Integer, default=0, server_default=text("0"), nullable=False)
    max_attempts: Mapped[int] = mapped_column(
        Integer, default=3, server_default=text("3"), nullable=False
    )
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)


class Notification(Base):
    """In-app notification for a user."""
    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_user", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    startup_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="SET NULL"), nullable=True
    )
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
