# rentable/schemas/barter.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

BarterStatus = Literal["pending", "accepted", "rejected", "completed"]


class BarterOfferCreate(SQLModel):
    """
    Payload for proposing a trade. The recipient is always the listing owner.
    """

    model_config = ConfigDict(extra="forbid")

    listing_id: uuid.UUID
    offered_item_description: str = Field(min_length=10)
    offered_item_value: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    message: str | None = None

    @field_validator("offered_item_description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("description must be at least 10 characters")
        return v


class BarterOfferRead(SQLModel):
    id: uuid.UUID
    listing_id: uuid.UUID
    from_user_id: uuid.UUID
    to_user_id: uuid.UUID
    offered_item_description: str
    offered_item_value: Decimal | None
    message: str | None
    status: BarterStatus
    created_at: datetime


class BarterStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: Literal["accepted", "rejected", "completed"]
