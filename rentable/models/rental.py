# rentable/models/rental.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Rental(SQLModel, table=True):
    """
    A booked, time-bounded lease of a listing.

    owner_id is copied from listings.user_id at creation time and never
    changes afterwards, even if the listing changes hands.

    Two orthogonal axes:
      - status         : pending -> confirmed -> in_progress -> completed
                         (canceled from pending / confirmed)
      - payment_status : pending -> paid -> refunded
                         (only moved by the payment webhook)
    """

    __tablename__ = "rentals"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    renter_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    owner_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    start_date: datetime
    end_date: datetime

    total_price: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="price_per_day x whole days, rounded to cents",
    )

    status: str = Field(default="pending", index=True)
    payment_status: str = Field(default="pending", index=True)

    stripe_checkout_session_id: str | None = Field(default=None, max_length=255)
    stripe_payment_intent_id: str | None = Field(default=None, max_length=255)

    notes: str | None = None
    meetup_location: str | None = Field(default=None, max_length=255)

    damage_reported: bool = Field(default=False)
    damage_description: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Review(SQLModel, table=True):
    """
    One-directional rating left after a completed rental. Append-only.
    """

    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("rental_id", "from_user_id"),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    rental_id: uuid.UUID = Field(foreign_key="rentals.id", index=True)
    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    from_user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    to_user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    rating: int = Field(ge=1, le=5)
    comment: str | None = None

    # renter_to_owner | owner_to_renter
    review_type: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
