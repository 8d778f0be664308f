# rentable/models/barter.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class BarterOffer(SQLModel, table=True):
    """
    Non-monetary trade proposal against a barter-enabled listing.

    status: pending -> accepted | rejected, accepted -> completed
    """

    __tablename__ = "barter_offers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    listing_id: uuid.UUID = Field(foreign_key="listings.id", index=True)
    from_user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    to_user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    offered_item_description: str
    offered_item_value: Decimal | None = Field(
        default=None,
        max_digits=10,
        decimal_places=2,
    )
    message: str | None = None

    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
