"""Startup-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from venture_registry.db.enums import ApprovalStatus, RegistrationType


class StartupCreate(BaseModel):
    """Request schema for creating a startup. All fields optional."""
    name: str | None = None
    pitch: str | None = None


class FounderRead(BaseModel):
    id: UUID
    fullname: str | None
    title: str | None

    model_config = {"from_attributes": True}


class StartupRead(BaseModel):
    """Response schema for reading a startup."""
    id: UUID
    name: str | None
    pitch: str | None
    approval_status: ApprovalStatus | None
    registration_type: RegistrationType
    address: str | None
    state: str | None
    district: str | None
    total_shares: int | None
    created_at: datetime
    founders: list[FounderRead] = []

    model_config = {"from_attributes": True}
