# rentable/models/support.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class SupportTicket(SQLModel, table=True):
    """
    Support request. Guests may file tickets too (user_id is then null).
    """

    __tablename__ = "support_tickets"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID | None = Field(default=None, foreign_key="users.id", index=True)

    name: str = Field(max_length=255)
    email: str = Field(max_length=320)
    subject: str = Field(max_length=255)
    message: str

    # general | billing | listing | rental | safety | bug | other
    category: str = Field(default="general")

    # open | in_progress | resolved | closed
    status: str = Field(default="open", index=True)

    # low | medium | high | urgent
    priority: str = Field(default="medium")

    admin_notes: str | None = None
    resolved_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
