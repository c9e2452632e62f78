"""Registration-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from venture_registry.db.enums import RegistrationType


class PartnerEntry(BaseModel):
    """One partner of record in a registration request."""
    fullname: str | None = None
    email: EmailStr
    shares: int = Field(default=0, ge=0)
    cash_contribution: Decimal = Field(default=Decimal("0"), ge=0)
    salary: Decimal = Field(default=Decimal("0"), ge=0)
    managing_director: bool = False
    operate_bank_account: bool = False

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower()


class LegalFields(BaseModel):
    """Legal details stored on the startup at registration."""
    address: str | None = None
    state: str | None = None
    district: str | None = None
    pitch: str | None = None
    total_shares: int | None = Field(default=None, ge=0)


class RegistrationCreate(LegalFields):
    """
    Request schema for registering a startup.

    Validates:
    - registration_type is a real legal form (not "none")
    - at least one partner is supplied
    """
    registration_type: RegistrationType
    partners: list[PartnerEntry] = Field(min_length=1)

    @field_validator("registration_type")
    @classmethod
    def not_none_type(cls, v: RegistrationType) -> RegistrationType:
        if v == RegistrationType.NONE:
            raise ValueError("registration_type must name a legal form")
        return v

    def legal_fields(self) -> LegalFields:
        """Legal fields the request actually supplied."""
        supplied = self.model_dump(include=set(LegalFields.model_fields), exclude_unset=True)
        return LegalFields(**supplied)


class PartnershipRead(BaseModel):
    """Response schema for a partnership record."""
    id: UUID
    user_id: UUID
    startup_id: UUID
    position: int
    shares: int
    cash_contribution: Decimal
    salary: Decimal
    managing_director: bool
    operate_bank_account: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationRead(BaseModel):
    """Response schema for a completed registration."""
    startup_id: UUID
    registration_type: RegistrationType
    partnerships: list[PartnershipRead]
