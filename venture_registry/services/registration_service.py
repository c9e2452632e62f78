"""Registration service - turn a startup's founders into legal partnerships.

Registration writes the legal fields onto the startup once, then creates one
Partnership per partner entry, in request order. Partners are matched to
existing users by email; unknown emails get a new user of record (not an
invitation). Nothing is committed here: the caller commits once, so a
failure anywhere leaves no partial registration.
"""

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from venture_registry.core.errors import InvalidPartnerEntry, StartupAlreadyRegistered
from venture_registry.core.structured_logging import build_log_context
from venture_registry.db.enums import RegistrationType
from venture_registry.db.models import Partnership, Startup, User
from venture_registry.schemas.registration import LegalFields, PartnerEntry
from venture_registry.services import membership_service, user_service


logger = logging.getLogger(__name__)


def is_registered(startup: Startup) -> bool:
    return startup.registration_type != RegistrationType.NONE.value


def _validate_partners(partners: list[PartnerEntry]) -> None:
    if not partners:
        raise InvalidPartnerEntry("At least one partner is required")
    seen: set[str] = set()
    for index, partner in enumerate(partners):
        email = user_service.normalize_email(partner.email or "")
        if not email:
            raise InvalidPartnerEntry(f"Partner #{index + 1} has no email")
        if email in seen:
            raise InvalidPartnerEntry(f"Partner {email} is listed more than once")
        if min(partner.shares, partner.cash_contribution, partner.salary) < 0:
            raise InvalidPartnerEntry(f"Partner {email} has a negative amount")
        seen.add(email)


def _apply_registration(
    db: Session,
    startup: Startup,
    registration_type: RegistrationType,
    legal_fields: LegalFields,
) -> None:
    result = db.execute(
        update(Startup)
        .where(
            Startup.id == startup.id,
            Startup.registration_type == RegistrationType.NONE.value,
        )
        .values(
            registration_type=registration_type.value,
            # Fields left out of the request keep their stored values
            **legal_fields.model_dump(exclude_unset=True),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise StartupAlreadyRegistered()
    db.refresh(startup)


def _resolve_partner(db: Session, partner: PartnerEntry) -> User:
    user = user_service.get_user_by_email(db, partner.email)
    if user is not None:
        return user
    return user_service.create_user(db, email=partner.email, fullname=partner.fullname)


def register(
    db: Session,
    acting_user: User,
    startup: Startup,
    registration_type: RegistrationType,
    legal_fields: LegalFields,
    partners: list[PartnerEntry],
) -> list[Partnership]:
    """
    Register a startup as a legal entity and record its partners.

    Returns the partnerships in the order of `partners`.

    Raises:
        AuthorizedUserStartupMismatch: acting user is not a member of startup
        StartupAlreadyRegistered: registration_type is no longer "none"
        InvalidPartnerEntry: a partner entry is missing an email or duplicated
    """
    membership_service.require_authorized(acting_user, startup)
    if is_registered(startup):
        raise StartupAlreadyRegistered()
    _validate_partners(partners)

    db.flush()
    _apply_registration(db, startup, registration_type, legal_fields)

    partnerships = []
    for position, partner in enumerate(partners):
        user = _resolve_partner(db, partner)
        partnership = Partnership(
            user_id=user.id,
            startup_id=startup.id,
            position=position,
            shares=partner.shares,
            cash_contribution=partner.cash_contribution,
            salary=partner.salary,
            managing_director=partner.managing_director,
            operate_bank_account=partner.operate_bank_account,
        )
        db.add(partnership)
        partnerships.append(partnership)
    db.flush()

    logger.info(
        "Registered startup as %s with %d partner(s)",
        registration_type.value,
        len(partnerships),
        extra=build_log_context(user_id=str(acting_user.id), startup_id=str(startup.id)),
    )
    return partnerships


def list_partnerships(db: Session, startup: Startup) -> list[Partnership]:
    """Partnerships of a startup in registration order."""
    return list(
        db.query(Partnership)
        .filter(Partnership.startup_id == startup.id)
        .order_by(Partnership.position)
        .all()
    )
