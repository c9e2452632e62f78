"""Endpoints scoped to the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venture_registry.core.deps import get_current_user, get_db
from venture_registry.db.models import User
from venture_registry.schemas.user import NotificationRead, UserRead
from venture_registry.services import invite_service, notification_service


router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=UserRead)
async def read_me(user: User = Depends(get_current_user)):
    return user


@router.post("/invitation/accept", response_model=UserRead)
async def accept_invitation(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Accept the pending cofounder invitation."""
    invite_service.accept_invitation(db, user)
    db.commit()
    db.refresh(user)
    return user


@router.get("/notifications", response_model=list[NotificationRead])
async def list_notifications(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """In-app notifications for the current user, newest first."""
    return notification_service.list_notifications(db, user.id)
