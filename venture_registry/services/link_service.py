"""Direct startup linking for authenticated users.

A signed-in user who already proved control of the invited address joins a
startup directly, skipping the pending state. Existing founders are told
about the new cofounder.
"""

import logging

from sqlalchemy.orm import Session

from venture_registry.core.errors import UserAlreadyMemberOfStartup, UserHasPendingStartupInvite
from venture_registry.core.structured_logging import build_log_context
from venture_registry.db.models import Startup, User
from venture_registry.services import (
    email_service,
    membership_service,
    notification_service,
    user_service,
)


logger = logging.getLogger(__name__)


def _raise_for_blocking_relation(user: User, startup: Startup) -> None:
    if user.startup_id is not None:
        raise UserAlreadyMemberOfStartup()
    if user.pending_startup_id is not None and user.pending_startup_id != startup.id:
        raise UserHasPendingStartupInvite()


def confirm_link(
    db: Session,
    user: User,
    startup: Startup,
    title: str | None = None,
) -> User:
    """
    Attach an authenticated user to a startup as a cofounder.

    A pending invitation to this same startup is superseded.

    Raises:
        UserAlreadyMemberOfStartup: user already belongs to a startup
        UserHasPendingStartupInvite: user is pending for a different startup
    """
    _raise_for_blocking_relation(user, startup)

    members = membership_service.list_members(db, startup)

    if not user_service.attach_to_startup(db, user, startup.id, title=title):
        _raise_for_blocking_relation(user, startup)
        raise UserAlreadyMemberOfStartup()

    for member in members:
        email_service.send_cofounder_joined(db, member, startup, user)
        notification_service.notify_cofounder_joined(db, member, startup, user)

    logger.info(
        "User linked to startup, notified %d founder(s)",
        len(members),
        extra=build_log_context(user_id=str(user.id), startup_id=str(startup.id)),
    )
    return user
