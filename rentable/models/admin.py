# rentable/models/admin.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class AdminSetting(SQLModel, table=True):
    """
    Free-form key/value settings managed from the admin panel.
    """

    __tablename__ = "admin_settings"

    key: str = Field(
        primary_key=True,
        max_length=255,
    )

    value: str | None = None

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
