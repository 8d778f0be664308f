# rentable/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; sqlite:// for local runs)
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (listing image uploads)
      - STRIPE_SECRET_KEY / STRIPE_WEBHOOK_SECRET
      - OPENAI_API_KEY (fair price suggestions)
      - SMTP_* and OWNER_NOTIFY_EMAIL (owner notifications)
    """

    PROJECT_NAME: str = "Rentable API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "listings"

    # Auth user id that is promoted to admin on first login
    OWNER_USER_ID: str | None = None

    # Stripe
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_WEBHOOK_SECRET: str | None = None
    STRIPE_CURRENCY: str = "usd"

    # Fair price oracle
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT_SECONDS: float = 15.0

    # Token economy
    SIGNUP_BONUS_TOKENS: int = 100
    LISTING_REWARD_TOKENS: int = 25
    PAYMENT_REWARD_TOKENS: int = 10

    # SMTP (owner notifications)
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Rentable"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    OWNER_NOTIFY_EMAIL: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
