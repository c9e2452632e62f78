"""Startup endpoints: lifecycle, founders roster, linking and registration."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from venture_registry.core.deps import get_current_user, get_db
from venture_registry.db.models import User
from venture_registry.schemas.founder import (
    FounderInvite,
    FounderInviteRead,
    FounderRemoveRead,
    FounderStatusRead,
    LinkRequest,
)
from venture_registry.schemas.registration import (
    PartnershipRead,
    RegistrationCreate,
    RegistrationRead,
)
from venture_registry.schemas.startup import StartupCreate, StartupRead
from venture_registry.schemas.user import UserRead
from venture_registry.services import (
    invite_service,
    link_service,
    membership_service,
    registration_service,
    startup_service,
)


router = APIRouter(prefix="/startups", tags=["startups"])


def _split_emails(raw: str | None) -> list[str] | None:
    if raw is None or not raw.strip():
        return None
    return [e.strip() for e in raw.split(",") if e.strip()]


# =============================================================================
# Lifecycle
# =============================================================================


@router.post("", response_model=StartupRead, status_code=201)
async def create_startup(
    body: StartupCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a startup with the caller as its first founder."""
    startup = startup_service.create_startup(db, user, name=body.name, pitch=body.pitch)
    db.commit()
    db.refresh(startup)
    return startup


@router.get("/{startup_id}", response_model=StartupRead)
async def get_startup(
    startup_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return startup_service.get_startup(db, startup_id)


@router.post("/{startup_id}/incubate", response_model=StartupRead)
async def incubate_startup(
    startup_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Submit the startup for incubation (approval status becomes pending)."""
    startup = startup_service.get_startup(db, startup_id)
    startup_service.incubate(db, user, startup)
    db.commit()
    db.refresh(startup)
    return startup


# =============================================================================
# Founders
# =============================================================================


@router.get("/{startup_id}/founders", response_model=list[FounderStatusRead])
async def list_founders(
    startup_id: UUID,
    email: str | None = Query(default=None, description="Comma-separated emails"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Cofounder statuses relative to this startup.

    With ?email=a,b every address must exist (404 FounderMissing otherwise)
    and rows come back in the order requested. Without it, all members then
    all pending invitees. Only members of the startup may ask.
    """
    startup = startup_service.get_startup(db, startup_id)
    membership_service.require_authorized(user, startup)
    emails = _split_emails(email)
    rows = membership_service.list_statuses(db, startup, emails=emails, strict=emails is not None)
    return [FounderStatusRead(**row) for row in rows]


@router.post("/{startup_id}/founders", response_model=FounderInviteRead, status_code=201)
async def invite_founder(
    startup_id: UUID,
    body: FounderInvite,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Invite a cofounder by email."""
    startup = startup_service.get_startup(db, startup_id)
    result = invite_service.invite(
        db, user, startup, email=body.email, fullname=body.fullname, title=body.title
    )
    db.commit()
    db.refresh(result.user)
    return FounderInviteRead(outcome=result.outcome, user=UserRead.model_validate(result.user))


@router.delete("/{startup_id}/founders", response_model=FounderRemoveRead)
async def remove_founder(
    startup_id: UUID,
    email: str = Query(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Withdraw a pending cofounder invitation."""
    startup = startup_service.get_startup(db, startup_id)
    result = invite_service.remove(db, user, startup, email)
    db.commit()
    return FounderRemoveRead(outcome=result.outcome, email=result.email)


@router.post("/{startup_id}/link_employee", response_model=UserRead)
async def link_employee(
    startup_id: UUID,
    body: LinkRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Join the startup directly as a cofounder, with position stored as title."""
    startup = startup_service.get_startup(db, startup_id)
    link_service.confirm_link(db, user, startup, title=body.position)
    db.commit()
    db.refresh(user)
    return user


# =============================================================================
# Registration
# =============================================================================


@router.post("/{startup_id}/registration", response_model=RegistrationRead, status_code=201)
async def register_startup(
    startup_id: UUID,
    body: RegistrationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Register the startup's legal form together with its partners of record."""
    startup = startup_service.get_startup(db, startup_id)
    partnerships = registration_service.register(
        db,
        user,
        startup,
        registration_type=body.registration_type,
        legal_fields=body.legal_fields(),
        partners=body.partners,
    )
    db.commit()
    db.refresh(startup)
    return RegistrationRead(
        startup_id=startup.id,
        registration_type=startup.registration_type,
        partnerships=[PartnershipRead.model_validate(p) for p in partnerships],
    )


@router.get("/{startup_id}/registration", response_model=RegistrationRead)
async def get_registration(
    startup_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    startup = startup_service.get_startup(db, startup_id)
    membership_service.require_authorized(user, startup)
    partnerships = registration_service.list_partnerships(db, startup)
    return RegistrationRead(
        startup_id=startup.id,
        registration_type=startup.registration_type,
        partnerships=[PartnershipRead.model_validate(p) for p in partnerships],
    )
