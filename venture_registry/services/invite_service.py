"""Cofounder invitation service.

Invites go to an email address. If nobody is registered under it, a
placeholder user is created with an invitation token; otherwise the
existing user is marked pending. Either way the user ends up with
pending_startup_id set and an invitation queued.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from venture_registry.core.errors import (
    FounderMissing,
    UserAlreadyMemberOfStartup,
    UserHasPendingStartupInvite,
    UserIsNotPendingFounder,
    UserPendingStartupMismatch,
)
from venture_registry.core.security import generate_invitation_token
from venture_registry.core.structured_logging import build_log_context, mask_email
from venture_registry.db.models import Startup, User
from venture_registry.services import (
    email_service,
    membership_service,
    notification_service,
    user_service,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InviteResult:
    """Outcome of an invitation: a new placeholder user, or an existing user attached."""

    outcome: Literal["created", "attached"]
    user: User

    @property
    def created(self) -> bool:
        return self.outcome == "created"


@dataclass(frozen=True)
class RemoveResult:
    """Outcome of removing a pending founder."""

    outcome: Literal["deleted", "detached"]
    email: str


def _raise_for_existing_relation(user: User) -> None:
    if user.startup_id is not None:
        raise UserAlreadyMemberOfStartup()
    if user.pending_startup_id is not None:
        raise UserHasPendingStartupInvite()


def invite(
    db: Session,
    acting_user: User,
    startup: Startup,
    email: str,
    fullname: str | None = None,
    title: str | None = None,
) -> InviteResult:
    """
    Invite a cofounder to the acting user's startup.

    Raises:
        AuthorizedUserStartupMismatch: acting user is not a member of startup
        UserAlreadyMemberOfStartup: invitee already belongs to a startup
        UserHasPendingStartupInvite: invitee already has a pending invitation
    """
    membership_service.require_authorized(acting_user, startup)
    log_context = build_log_context(user_id=str(acting_user.id), startup_id=str(startup.id))

    existing = user_service.get_user_by_email(db, email)
    if existing is None:
        token = generate_invitation_token()
        try:
            user = user_service.create_user(
                db,
                email=email,
                fullname=fullname,
                title=title,
                pending_startup_id=startup.id,
                invitation_token=token,
            )
        except IntegrityError:
            # Another request created this email first
            db.rollback()
            raced = user_service.get_user_by_email(db, email)
            if raced is not None:
                _raise_for_existing_relation(raced)
            raise UserHasPendingStartupInvite()

        email_service.send_cofounder_invitation(
            db, user, startup, inviter=acting_user, invitation_token=token
        )
        logger.info(
            "Invited new cofounder %s", mask_email(user.email), extra=log_context
        )
        return InviteResult(outcome="created", user=user)

    _raise_for_existing_relation(existing)
    if not user_service.set_pending_startup(db, existing, startup.id):
        _raise_for_existing_relation(existing)
        raise UserHasPendingStartupInvite()

    email_service.send_cofounder_invitation(db, existing, startup, inviter=acting_user)
    notification_service.notify_cofounder_invited(db, existing, startup, acting_user)
    logger.info(
        "Invited existing user %s as cofounder", mask_email(existing.email), extra=log_context
    )
    return InviteResult(outcome="attached", user=existing)


def remove(db: Session, acting_user: User, startup: Startup, email: str) -> RemoveResult:
    """
    Withdraw a pending cofounder invitation.

    The invitee record is deleted. A user already referenced by a
    partnership is only detached from the invitation.

    Raises:
        AuthorizedUserStartupMismatch: acting user is not a member of startup
        FounderMissing: no user with this email
        UserIsNotPendingFounder: user has no pending invitation
        UserPendingStartupMismatch: invitation is for another startup
    """
    membership_service.require_authorized(acting_user, startup)

    user = user_service.get_user_by_email(db, email)
    if user is None:
        raise FounderMissing()
    if user.pending_startup_id is None:
        raise UserIsNotPendingFounder()
    if user.pending_startup_id != startup.id:
        raise UserPendingStartupMismatch()

    removed_email = user.email
    if user_service.has_partnerships(db, user.id):
        user_service.detach_pending(db, user)
        outcome = "detached"
    else:
        user_service.delete_user(db, user)
        outcome = "deleted"

    logger.info(
        "Removed pending cofounder %s (%s)",
        mask_email(removed_email),
        outcome,
        extra=build_log_context(user_id=str(acting_user.id), startup_id=str(startup.id)),
    )
    return RemoveResult(outcome=outcome, email=removed_email)


def accept_invitation(db: Session, user: User) -> User:
    """
    Accept the user's pending invitation: pending becomes membership.

    Existing founders are notified of the new cofounder.

    Raises:
        UserAlreadyMemberOfStartup: user already belongs to a startup
        UserIsNotPendingFounder: user has no pending invitation
    """
    if user.startup_id is not None:
        raise UserAlreadyMemberOfStartup()
    if user.pending_startup_id is None:
        raise UserIsNotPendingFounder()

    startup = db.get(Startup, user.pending_startup_id)
    members = membership_service.list_members(db, startup)

    if not user_service.promote_pending_to_member(db, user):
        if user.startup_id is not None:
            raise UserAlreadyMemberOfStartup()
        raise UserIsNotPendingFounder()

    for member in members:
        email_service.send_cofounder_joined(db, member, startup, user)
        notification_service.notify_cofounder_joined(db, member, startup, user)

    logger.info(
        "Cofounder accepted invitation",
        extra=build_log_context(user_id=str(user.id), startup_id=str(startup.id)),
    )
    return user
