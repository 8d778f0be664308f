# rentable/schemas/token.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

TransactionType = Literal["purchase", "earn", "spend", "refund", "bonus"]


class TokenTransactionRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: int
    type: TransactionType
    description: str | None
    related_id: uuid.UUID | None
    created_at: datetime


class TokenBalance(SQLModel):
    balance: int


class TokenSpend(SQLModel):
    """Payload for spending tokens on a platform feature."""

    model_config = ConfigDict(extra="forbid")

    amount: int = Field(gt=0)
    description: str = Field(max_length=255)

    @field_validator("description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty")
        return v
