# rentable/schemas/support.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

TicketCategory = Literal["general", "billing", "listing", "rental", "safety", "bug", "other"]
TicketStatus = Literal["open", "in_progress", "resolved", "closed"]
TicketPriority = Literal["low", "medium", "high", "urgent"]


class SupportTicketCreate(SQLModel):
    """
    Payload for contacting support. Available to guests.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    subject: str = Field(min_length=5, max_length=255)
    message: str = Field(min_length=20)
    category: TicketCategory = "general"

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip(cls, v):
        # Trim before length checks
        return v.strip() if isinstance(v, str) else v


class SupportTicketRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    name: str
    email: str
    subject: str
    message: str
    category: TicketCategory
    status: TicketStatus
    priority: TicketPriority
    admin_notes: str | None
    resolved_at: datetime | None
    created_at: datetime


class SupportTicketUpdate(SQLModel):
    """
    Admin triage payload. Setting status to 'resolved' stamps resolved_at.
    """

    model_config = ConfigDict(extra="forbid")

    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    admin_notes: str | None = None
