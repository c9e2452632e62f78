"""Notification service - in-app notices for founders."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from venture_registry.db.enums import JobType, NotificationType
from venture_registry.db.models import Job, Notification, Startup, User
from venture_registry.services import job_service


def queue_notification(
    db: Session,
    user: User,
    type: NotificationType,
    title: str,
    message: str | None = None,
    startup: Startup | None = None,
) -> Job:
    """Queue an in-app notification; the worker materializes it."""
    return job_service.schedule_job(
        db,
        JobType.NOTIFICATION,
        payload={
            "user_id": str(user.id),
            "startup_id": str(startup.id) if startup else None,
            "type": type.value,
            "title": title,
            "message": message,
        },
        startup_id=startup.id if startup else None,
    )


def create_notification(
    db: Session,
    user_id: UUID,
    type: str,
    title: str,
    message: str | None = None,
    startup_id: UUID | None = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        startup_id=startup_id,
        notification_type=type,
        title=title,
        message=message,
    )
    db.add(notification)
    db.flush()
    return notification


def list_notifications(db: Session, user_id: UUID) -> list[Notification]:
    """Notifications for a user, newest first."""
    return list(
        db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        ).scalars().all()
    )


def notify_cofounder_invited(db: Session, invitee: User, startup: Startup, inviter: User) -> Job:
    inviter_name = inviter.fullname or inviter.email
    return queue_notification(
        db,
        invitee,
        NotificationType.COFOUNDER_INVITED,
        title=f"{inviter_name} invited you to be a co-founder",
        message=f"You have a pending invitation to join {startup.name or 'a startup'}.",
        startup=startup,
    )


def notify_cofounder_joined(db: Session, member: User, startup: Startup, new_cofounder: User) -> Job:
    name = new_cofounder.fullname or new_cofounder.email
    return queue_notification(
        db,
        member,
        NotificationType.COFOUNDER_JOINED,
        title=f"{name} joined your startup",
        message=new_cofounder.title,
        startup=startup,
    )
