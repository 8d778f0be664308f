# rentable/models/listing.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Listing(SQLModel, table=True):
    """
    An item posted for rent.

    availability:
      - "available"   : visible in search, can be requested
      - "rented"      : reserved by a rental request (see RentalService)
      - "unavailable" : withdrawn by the owner or removed by an admin
    """

    __tablename__ = "listings"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owner of the listing",
    )

    title: str = Field(
        max_length=255,
        min_length=3,
        index=True,
    )

    description: str | None = None

    # generators, pumps, tools, safety, vehicles, home, events, weird, other
    category: str = Field(max_length=50, index=True)

    price_per_day: Decimal = Field(
        gt=0,
        max_digits=10,
        decimal_places=2,
        description="Daily rental price",
    )

    fair_value_price: Decimal | None = Field(
        default=None,
        max_digits=10,
        decimal_places=2,
        description="AI-suggested fair daily price (advisory)",
    )

    location: str = Field(max_length=255)
    zip_code: str | None = Field(default=None, max_length=10, index=True)

    # like_new | good | fair | poor
    condition: str = Field(default="good")

    availability: str = Field(default="available", index=True)

    # Moderation
    is_verified: bool = Field(default=False)
    is_flagged: bool = Field(default=False, index=True)
    flag_reason: str | None = None
    # Taken down by an admin; only an admin approval restores it
    is_removed: bool = Field(default=False, index=True)

    # Feature flags
    is_emergency: bool = Field(default=False, index=True)
    is_weird: bool = Field(default=False, index=True)
    is_barter_enabled: bool = Field(default=False)
    is_delivery_available: bool = Field(default=False)

    images: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    specs: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    view_count: int = Field(default=0, ge=0)

    co2_saved_per_rental: Decimal | None = Field(
        default=None,
        max_digits=8,
        decimal_places=2,
        description="Estimated kg CO2 avoided per rental",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
