"""Founder invitation and linking schemas."""

from typing import Literal

from pydantic import BaseModel, EmailStr, field_validator

from venture_registry.db.enums import CofounderStatus
from venture_registry.schemas.user import UserRead


class FounderInvite(BaseModel):
    """
    Request schema for inviting a cofounder.

    Validates:
    - Email format
    - Email is normalized to lowercase
    """
    email: EmailStr
    fullname: str | None = None
    title: str | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower()


class FounderInviteRead(BaseModel):
    """Response schema for an invitation: which path was taken, and the invitee."""
    outcome: Literal["created", "attached"]
    user: UserRead


class FounderRemoveRead(BaseModel):
    outcome: Literal["deleted", "detached"]
    email: str


class FounderStatusRead(BaseModel):
    fullname: str | None
    email: str
    status: CofounderStatus


class LinkRequest(BaseModel):
    """Request schema for linking the signed-in user to a startup."""
    position: str | None = None
