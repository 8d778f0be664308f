# rentable/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user profile for Rentable.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "user" | "admin"
      - "guest" is represented by the absence of a row / missing token.

    token_balance is a cached projection of token_transactions; it is only
    ever moved together with a ledger entry (see TokenService).
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    name: str = Field(
        max_length=100,
        description="Login name; first part of email by default",
    )

    # Application role (not Supabase RLS role)
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    # Profile
    display_name: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    avatar_url: str | None = Field(default=None, max_length=512)
    location: str | None = Field(default=None, max_length=255)
    zip_code: str | None = Field(default=None, max_length=10)
    phone: str | None = Field(default=None, max_length=20)

    # default | wcag_aaa | eco_code | neuro_code | dyslexic | no_blue_light
    accessibility_mode: str = Field(default="default")

    # Token economy
    token_balance: int = Field(
        default=0,
        ge=0,
        description="Cached sum of the user's token ledger",
    )

    # Subscription (mirrored from Stripe)
    # free | starter | pro | enterprise
    subscription_tier: str = Field(default="free")
    # active | canceled | past_due | none
    subscription_status: str = Field(default="none")
    stripe_customer_id: str | None = Field(default=None, max_length=255)
    subscription_id: str | None = Field(default=None, max_length=255)

    # Moderation
    is_banned: bool = Field(default=False, index=True)
    ban_reason: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
