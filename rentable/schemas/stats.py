# rentable/schemas/stats.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class AdminDashboardStats(SQLModel):
    """
    Aggregate counts for the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    user_count: int
    listing_count: int
    rental_count: int
    open_ticket_count: int


class AdminSettingRead(SQLModel):
    key: str
    value: str | None
    updated_at: datetime


class AdminSettingWrite(SQLModel):
    model_config = ConfigDict(extra="forbid")

    value: str = Field(max_length=10000)
