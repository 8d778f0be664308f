# rentable/models/token.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class TokenTransaction(SQLModel, table=True):
    """
    Append-only token ledger entry.

    amount is signed: positive for purchase / earn / refund / bonus,
    negative for spend.
    """

    __tablename__ = "token_transactions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    amount: int

    # purchase | earn | spend | refund | bonus
    type: str = Field(index=True)

    description: str | None = Field(default=None, max_length=255)

    # rental id, listing id, ... (no FK: may point at any table)
    related_id: uuid.UUID | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
