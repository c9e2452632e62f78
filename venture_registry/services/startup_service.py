"""Startup service - creation, lookup and incubation requests."""

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from venture_registry.core.errors import (
    StartupInvalidApprovalState,
    StartupNotFound,
    UserAlreadyHasStartup,
    UserHasPendingStartupInvite,
)
from venture_registry.core.structured_logging import build_log_context
from venture_registry.db.enums import ApprovalStatus
from venture_registry.db.models import Startup, User
from venture_registry.services import membership_service, user_service


logger = logging.getLogger(__name__)


def get_startup(db: Session, startup_id: UUID) -> Startup:
    """
    Get startup by ID.

    Raises:
        StartupNotFound: If no startup has this ID
    """
    startup = db.get(Startup, startup_id)
    if startup is None:
        raise StartupNotFound()
    return startup


def create_startup(
    db: Session,
    user: User,
    name: str | None = None,
    pitch: str | None = None,
) -> Startup:
    """
    Create a startup with the user as its first founder.

    Raises:
        UserAlreadyHasStartup: user already belongs to a startup
        UserHasPendingStartupInvite: user has a pending cofounder invitation
    """
    if user.startup_id is not None:
        raise UserAlreadyHasStartup()
    if user.pending_startup_id is not None:
        raise UserHasPendingStartupInvite()

    startup = Startup(name=name.strip() if name else None, pitch=pitch)
    db.add(startup)
    db.flush()

    if not user_service.attach_to_startup(db, user, startup.id):
        raise UserAlreadyHasStartup()

    logger.info(
        "Created startup",
        extra=build_log_context(user_id=str(user.id), startup_id=str(startup.id)),
    )
    return startup


def incubate(db: Session, acting_user: User, startup: Startup) -> Startup:
    """
    Request incubation: approval status moves from unset to pending.

    Raises:
        AuthorizedUserStartupMismatch: acting user is not a member of startup
        StartupInvalidApprovalState: approval status is already set
    """
    membership_service.require_authorized(acting_user, startup)
    if startup.approval_status is not None:
        raise StartupInvalidApprovalState()

    db.flush()
    result = db.execute(
        update(Startup)
        .where(Startup.id == startup.id, Startup.approval_status.is_(None))
        .values(approval_status=ApprovalStatus.PENDING.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise StartupInvalidApprovalState()
    db.refresh(startup)

    logger.info(
        "Startup submitted for incubation",
        extra=build_log_context(user_id=str(acting_user.id), startup_id=str(startup.id)),
    )
    return startup
