"""Pydantic schemas for external accounts and their balance entries."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from integrations.parsing_utils import MONEY_PLACES, round_half_away


def _round_money(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is None:
        return None
    if not value.is_finite():
        raise ValueError("value must be a finite number")
    return round_half_away(value, MONEY_PLACES)


class ExternalAccountCreate(BaseModel):
    """Schema for creating an external account."""

    institution_name: str = Field(max_length=255)
    account_name: str = Field(max_length=255)
    account_type: Optional[str] = Field(default=None, max_length=100)
    initial_value: Optional[Decimal] = None

    @field_validator("institution_name", "account_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("initial_value")
    @classmethod
    def round_initial_value(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _round_money(v)


class EntryCreate(BaseModel):
    """Schema for appending a balance to an account."""

    value: Decimal
    note: Optional[str] = Field(default=None, max_length=500)
    recorded_at: Optional[datetime] = None

    @field_validator("value")
    @classmethod
    def round_value(cls, v: Decimal) -> Decimal:
        return _round_money(v)


class EntryResponse(BaseModel):
    """Schema for ExternalAccountEntry API response."""

    id: str
    account_id: str
    value: Decimal
    note: Optional[str] = None
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExternalAccountResponse(BaseModel):
    """Schema for an external account with its latest balance."""

    id: str
    institution_name: str
    account_name: str
    account_type: Optional[str] = None
    is_active: bool
    is_debt: bool
    created_at: datetime
    latest_value: Optional[Decimal] = None
    latest_recorded_at: Optional[datetime] = None
    entry_count: int = 0


class ExternalAccountDetail(ExternalAccountResponse):
    """External account with its full entry history, newest first."""

    entries: list[EntryResponse]
