from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from app.core.regions import canonical_state

Frequency = Literal["monthly", "quarterly", "yearly", "custom"]
RentalStatus = Literal["active", "terminated"]

# Fields that may be omitted from a PATCH but never explicitly nulled
REQUIRED_FIELDS = ("shop_name", "tenant_name", "state", "rent_amount", "frequency", "status")


def _check_name(v: Optional[str], label: str) -> Optional[str]:
    if v is None:
        return v
    if len(v) < 2:
        raise ValueError(f"{label} must be at least 2 characters.")
    return v


def _check_state(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    canonical = canonical_state(v)
    if canonical is None:
        raise ValueError("State must be selected.")
    return canonical


# Numeric(12, 2) column: ten integer digits, two decimal places
RENT_LIMIT = Decimal(10) ** 10
RENT_QUANTUM = Decimal("0.01")


def _check_rent(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is None:
        return v
    if v < 0:
        raise ValueError("Rent amount must be a positive number.")
    if v >= RENT_LIMIT:
        raise ValueError("Rent amount must be less than 10,000,000,000.")
    if v != v.quantize(RENT_QUANTUM):
        raise ValueError("Rent amount can have at most 2 decimal places.")
    return v


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return v or None


class RentalCreate(BaseModel):
    # owner_id / user_id / id / timestamps sent by a client are dropped here
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    shop_name: str
    tenant_name: str
    state: str
    rent_amount: Decimal
    due_date: Optional[date] = None  # ISO 8601 "YYYY-MM-DD"
    frequency: Frequency = "yearly"
    status: RentalStatus = "active"
    city: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("shop_name")
    @classmethod
    def shop_name_min_length(cls, v):
        return _check_name(v, "Shop name")

    @field_validator("tenant_name")
    @classmethod
    def tenant_name_min_length(cls, v):
        return _check_name(v, "Tenant name")

    @field_validator("state")
    @classmethod
    def state_must_be_known(cls, v):
        return _check_state(v)

    @field_validator("rent_amount")
    @classmethod
    def rent_must_be_non_negative(cls, v):
        return _check_rent(v)

    @field_validator("city", "address", "notes")
    @classmethod
    def blank_text_is_null(cls, v):
        return _blank_to_none(v)


class RentalUpdate(BaseModel):
    """PATCH payload. Only the fields present are validated and written."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    shop_name: Optional[str] = None
    tenant_name: Optional[str] = None
    state: Optional[str] = None
    rent_amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    frequency: Optional[Frequency] = None
    status: Optional[RentalStatus] = None
    city: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def required_fields_not_null(cls, v):
        # Defaults are not validated, so this only fires on an explicit null
        if v is None:
            raise ValueError("This field cannot be empty.")
        return v

    @field_validator("shop_name")
    @classmethod
    def shop_name_min_length(cls, v):
        return _check_name(v, "Shop name")

    @field_validator("tenant_name")
    @classmethod
    def tenant_name_min_length(cls, v):
        return _check_name(v, "Tenant name")

    @field_validator("state")
    @classmethod
    def state_must_be_known(cls, v):
        return _check_state(v)

    @field_validator("rent_amount")
    @classmethod
    def rent_must_be_non_negative(cls, v):
        return _check_rent(v)

    @field_validator("city", "address", "notes")
    @classmethod
    def blank_text_is_null(cls, v):
        return _blank_to_none(v)


class RentalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    shop_name: str
    tenant_name: str
    state: str
    rent_amount: Decimal
    due_date: Optional[date] = None
    frequency: str
    status: str
    city: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("rent_amount")
    def rent_as_number(self, v: Decimal):
        return float(v)


class RentalStatsOut(BaseModel):
    total_rentals: int
    upcoming_dues: int  # due within the next 30 days


class StatesOut(BaseModel):
    states: List[str]
