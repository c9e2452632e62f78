"""Membership service - who belongs to which startup, and in what state."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from venture_registry.core.errors import AuthorizedUserStartupMismatch, FounderMissing
from venture_registry.db.enums import CofounderStatus
from venture_registry.db.models import Startup, User
from venture_registry.services import user_service


def cofounder_status(user: User, startup: Startup) -> CofounderStatus:
    """Derive the user's cofounder status relative to one startup."""
    if user.pending_startup_id == startup.id:
        return CofounderStatus.PENDING
    if user.startup_id == startup.id:
        return CofounderStatus.ACCEPTED
    return CofounderStatus.REJECTED


def is_authorized_for(user: User, startup: Startup) -> bool:
    """True iff the user is a current member of the startup."""
    return user.startup_id is not None and user.startup_id == startup.id


def require_authorized(user: User, startup: Startup) -> None:
    """
    Guard for every roster mutation.

    Raises:
        AuthorizedUserStartupMismatch: If user is not a member of startup
    """
    if not is_authorized_for(user, startup):
        raise AuthorizedUserStartupMismatch()


def list_members(db: Session, startup: Startup) -> list[User]:
    """Current founders of a startup, oldest first."""
    return list(
        db.execute(
            select(User)
            .where(User.startup_id == startup.id)
            .order_by(User.created_at, User.email)
        ).scalars().all()
    )


def list_pending(db: Session, startup: Startup) -> list[User]:
    """Users with a pending invitation to the startup, oldest first."""
    return list(
        db.execute(
            select(User)
            .where(User.pending_startup_id == startup.id)
            .order_by(User.created_at, User.email)
        ).scalars().all()
    )


def _status_row(user: User, startup: Startup) -> dict:
    return {
        "fullname": user.fullname,
        "email": user.email,
        "status": cofounder_status(user, startup),
    }


def list_statuses(
    db: Session,
    startup: Startup,
    emails: list[str] | None = None,
    strict: bool = False,
) -> list[dict]:
    """
    Cofounder statuses for a startup.

    With emails: one row per known address, in the order given. Unknown
    addresses are skipped, or raise FounderMissing when strict is set.
    Without emails: all members followed by all pending invitees.
    """
    if emails is None:
        users = list_members(db, startup) + list_pending(db, startup)
        return [_status_row(u, startup) for u in users]

    found = user_service.get_users_by_emails(db, emails)
    rows = []
    for email in emails:
        user = found.get(user_service.normalize_email(email))
        if user is None:
            if strict:
                raise FounderMissing(f"No founder found for {email}")
            continue
        rows.append(_status_row(user, startup))
    return rows
