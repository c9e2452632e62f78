"""User-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserRead(BaseModel):
    """Response schema for a user."""
    id: UUID
    email: str
    fullname: str | None
    title: str | None
    startup_id: UUID | None
    pending_startup_id: UUID | None

    model_config = {"from_attributes": True}


class NotificationRead(BaseModel):
    """Response schema for an in-app notification."""
    id: UUID
    startup_id: UUID | None
    notification_type: str
    title: str
    message: str | None
    read_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
