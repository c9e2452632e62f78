"""User service - identity lookups and guarded membership writes.

Every transition into "pending" or "member" goes through a single
conditional UPDATE here, so two concurrent requests cannot both move the
same user (the loser sees rowcount 0 and re-reads the row).
"""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from venture_registry.core.structured_logging import mask_email
from venture_registry.db.models import Partnership, User


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Normalize email for lookups and storage."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    return db.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    ).scalar_one_or_none()


def get_users_by_emails(db: Session, emails: list[str]) -> dict[str, User]:
    """Resolve many emails at once. Keys are normalized emails."""
    normalized = [normalize_email(e) for e in emails if e and e.strip()]
    if not normalized:
        return {}
    users = db.execute(
        select(User).where(func.lower(User.email).in_(normalized))
    ).scalars().all()
    return {normalize_email(u.email): u for u in users}


def create_user(
    db: Session,
    email: str,
    fullname: str | None = None,
    title: str | None = None,
    pending_startup_id: UUID | None = None,
    invitation_token: str | None = None,
) -> User:
    """
    Create a user record.

    Raises:
        IntegrityError: If the email already exists (raised on flush)
    """
    user = User(
        email=normalize_email(email),
        fullname=fullname,
        title=title,
        pending_startup_id=pending_startup_id,
        invitation_token=invitation_token,
    )
    db.add(user)
    db.flush()
    logger.info("Created user %s (%s)", user.id, mask_email(user.email))
    return user


def delete_user(db: Session, user: User) -> None:
    """Permanently delete a user record."""
    db.delete(user)
    db.flush()


def has_partnerships(db: Session, user_id: UUID) -> bool:
    """Check whether any partnership references the user."""
    return db.execute(
        select(Partnership.id).where(Partnership.user_id == user_id).limit(1)
    ).first() is not None


# =============================================================================
# Guarded transitions
# =============================================================================


def _conditional_update(db: Session, user: User, conditions: list, values: dict) -> bool:
    db.flush()
    result = db.execute(
        update(User)
        .where(User.id == user.id, *conditions)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    db.refresh(user)
    return result.rowcount == 1


def set_pending_startup(db: Session, user: User, startup_id: UUID) -> bool:
    """Mark user as invited to startup_id if they have no startup and no pending invite."""
    return _conditional_update(
        db,
        user,
        [User.startup_id.is_(None), User.pending_startup_id.is_(None)],
        {"pending_startup_id": startup_id},
    )


def promote_pending_to_member(db: Session, user: User) -> bool:
    """Turn the user's pending invitation into membership and drop the invitation token."""
    if user.pending_startup_id is None:
        return False
    return _conditional_update(
        db,
        user,
        [User.startup_id.is_(None), User.pending_startup_id == user.pending_startup_id],
        {
            "startup_id": user.pending_startup_id,
            "pending_startup_id": None,
            "invitation_token": None,
        },
    )


def attach_to_startup(
    db: Session,
    user: User,
    startup_id: UUID,
    title: str | None = None,
) -> bool:
    """
    Make user a member of startup_id directly.

    Succeeds only when the user has no startup and is either not pending or
    pending for this same startup (the invitation is superseded).
    """
    values: dict = {
        "startup_id": startup_id,
        "pending_startup_id": None,
        "invitation_token": None,
        "startup_link_verifier_id": None,
    }
    if title is not None:
        values["title"] = title
    return _conditional_update(
        db,
        user,
        [
            User.startup_id.is_(None),
            or_(User.pending_startup_id.is_(None), User.pending_startup_id == startup_id),
        ],
        values,
    )


def detach_pending(db: Session, user: User) -> None:
    """Clear a pending invitation without deleting the user."""
    user.pending_startup_id = None
    user.invitation_token = None
    db.flush()
