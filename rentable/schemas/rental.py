# rentable/schemas/rental.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

RentalStatus = Literal["pending", "confirmed", "in_progress", "completed", "canceled"]
PaymentStatus = Literal["pending", "paid", "refunded"]

# Statuses a client may request; "confirmed" is reached through payment only.
RentalStatusChange = Literal["in_progress", "completed", "canceled"]


class RentalCreate(SQLModel):
    """
    Payload for requesting a rental.

    Backend derives:
      - renter_id from token, owner_id from the listing
      - total_price from listing.price_per_day and the whole-day span
      - status = 'pending', payment_status = 'pending'
    """

    model_config = ConfigDict(extra="forbid")

    listing_id: uuid.UUID
    start_date: datetime
    end_date: datetime
    notes: str | None = None
    meetup_location: str | None = Field(default=None, max_length=255)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are taken as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("notes", "meetup_location")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class RentalRead(SQLModel):
    id: uuid.UUID
    listing_id: uuid.UUID
    renter_id: uuid.UUID
    owner_id: uuid.UUID
    start_date: datetime
    end_date: datetime
    total_price: Decimal
    status: RentalStatus
    payment_status: PaymentStatus
    notes: str | None
    meetup_location: str | None
    damage_reported: bool
    damage_description: str | None
    created_at: datetime


class RentalStatusUpdate(SQLModel):
    """
    Participant payload to advance or cancel a rental.
    """

    model_config = ConfigDict(extra="forbid")

    status: RentalStatusChange


class DamageReport(SQLModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(min_length=5, max_length=2000)


ReviewType = Literal["renter_to_owner", "owner_to_renter"]


class ReviewCreate(SQLModel):
    """
    Payload for reviewing the other party of a completed rental.

    The target user is derived from the rental and review_type.
    """

    model_config = ConfigDict(extra="forbid")

    rental_id: uuid.UUID
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)
    review_type: ReviewType

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ReviewRead(SQLModel):
    id: uuid.UUID
    rental_id: uuid.UUID
    listing_id: uuid.UUID
    from_user_id: uuid.UUID
    to_user_id: uuid.UUID
    rating: int
    comment: str | None
    review_type: ReviewType
    created_at: datetime
