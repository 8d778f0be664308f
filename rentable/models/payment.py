# rentable/models/payment.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class PaymentEvent(SQLModel, table=True):
    """
    Processed Stripe webhook events.

    The primary key on event_id is what makes webhook handling idempotent:
    a row is written in the same transaction as the event's side effects,
    so a replayed (or concurrently delivered) event id cannot apply twice.
    """

    __tablename__ = "payment_events"

    event_id: str = Field(
        primary_key=True,
        max_length=255,
    )

    type: str = Field(max_length=100)

    processed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
