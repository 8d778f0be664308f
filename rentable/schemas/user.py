# rentable/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]
SubscriptionTier = Literal["free", "starter", "pro", "enterprise"]
SubscriptionStatus = Literal["active", "canceled", "past_due", "none"]
AccessibilityMode = Literal[
    "default", "wcag_aaa", "eco_code", "neuro_code", "dyslexic", "no_blue_light"
]


class UserRead(SQLModel):
    """Full profile returned to the user themselves and to admins."""

    id: uuid.UUID
    email: EmailStr
    name: str
    role: Role
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    location: str | None
    zip_code: str | None
    phone: str | None
    accessibility_mode: AccessibilityMode
    token_balance: int
    subscription_tier: SubscriptionTier
    subscription_status: SubscriptionStatus
    is_banned: bool
    ban_reason: str | None
    created_at: datetime


class PublicProfileRead(SQLModel):
    """Public projection of a user (no contact or billing data)."""

    id: uuid.UUID
    display_name: str
    bio: str | None
    location: str | None
    avatar_url: str | None
    role: Role
    created_at: datetime


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Email, role, balance and subscription are never editable here.
    """

    model_config = ConfigDict(extra="forbid")

    display_name: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    location: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=10)
    phone: str | None = Field(default=None, max_length=20)
    accessibility_mode: AccessibilityMode | None = None

    @field_validator("display_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("display_name cannot be empty")
        return v


class BanRequest(SQLModel):
    """Admin payload to ban a user."""

    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1, max_length=1000)
