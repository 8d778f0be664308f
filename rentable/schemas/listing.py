# rentable/schemas/listing.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Availability = Literal["available", "rented", "unavailable"]
Condition = Literal["like_new", "good", "fair", "poor"]

MAX_SEARCH_LIMIT = 100


class ListingCreate(SQLModel):
    """
    Payload for posting a new listing.

    Backend derives:
      - user_id from token
      - availability = 'available', is_verified = False
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=3, max_length=255)
    description: str | None = None
    category: str = Field(max_length=50)
    price_per_day: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    location: str = Field(max_length=255)
    zip_code: str | None = Field(default=None, max_length=10)
    condition: Condition = "good"
    images: list[str] = Field(default_factory=list)
    specs: dict[str, str] = Field(default_factory=dict)
    is_emergency: bool = False
    is_weird: bool = False
    is_barter_enabled: bool = False
    is_delivery_available: bool = False
    fair_value_price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    co2_saved_per_rental: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)

    @field_validator("title", "category", "location")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("title must be at least 3 characters")
        return v


class ListingUpdate(SQLModel):
    """
    Partial update payload for listings. All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    price_per_day: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    location: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=10)
    condition: Condition | None = None
    availability: Availability | None = None
    specs: dict[str, str] | None = None
    is_emergency: bool | None = None
    is_weird: bool | None = None
    is_barter_enabled: bool | None = None
    is_delivery_available: bool | None = None

    @field_validator("title", "category", "location")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ListingRead(SQLModel):
    """
    Listing representation for clients.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str | None
    category: str
    price_per_day: Decimal
    fair_value_price: Decimal | None
    location: str
    zip_code: str | None
    condition: Condition
    availability: Availability
    is_verified: bool
    is_flagged: bool
    flag_reason: str | None
    is_removed: bool
    is_emergency: bool
    is_weird: bool
    is_barter_enabled: bool
    is_delivery_available: bool
    images: list[str]
    specs: dict[str, str]
    view_count: int
    co2_saved_per_rental: Decimal | None
    created_at: datetime


class ListingSearch(SQLModel):
    """
    Search filters. Only available listings are ever returned.
    """

    category: str | None = None
    zip_code: str | None = None
    is_emergency: bool | None = None
    is_weird: bool | None = None
    query: str | None = None
    limit: int = Field(default=50, ge=1, le=MAX_SEARCH_LIMIT)


class ListingFlag(SQLModel):
    """Payload for flagging / removing a listing."""

    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1, max_length=1000)
