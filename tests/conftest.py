"""
Shared fixtures.

The app runs against an in-memory SQLite database (one connection through
StaticPool, so every session sees the same data). Route tests share the test
session with the app and pick the caller with `login(user)`.
"""

import os

# Settings are read at import time; provide the required ones first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from rentable.core.auth import get_current_user
from rentable.core.config import get_settings
from rentable.database import get_session
from rentable.main import app
from rentable.models.listing import Listing
from rentable.models.rental import Rental
from rentable.models.user import User
from rentable.repositories.token_repo import TokenRepository
from rentable.services.token_service import TokenService


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def tokens():
    return TokenService(TokenRepository())


@pytest.fixture
def make_user(session, tokens):
    def _make(role: str = "user", balance: int = 0, **fields) -> User:
        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            email=fields.pop("email", f"{user_id.hex[:10]}@example.com"),
            name=fields.pop("name", f"user-{user_id.hex[:6]}"),
            role=role,
            **fields,
        )
        session.add(user)
        session.commit()
        if balance:
            tokens.credit(session, user_id, balance, "purchase", "Test top-up")
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_listing(session):
    def _make(owner: User, **fields) -> Listing:
        listing = Listing(
            user_id=owner.id,
            title=fields.pop("title", "Cordless drill"),
            category=fields.pop("category", "tools"),
            price_per_day=fields.pop("price_per_day", Decimal("12.50")),
            location=fields.pop("location", "Portland, OR"),
            **fields,
        )
        session.add(listing)
        session.commit()
        session.refresh(listing)
        return listing

    return _make


@pytest.fixture
def make_rental(session):
    """Insert a rental directly in any state (listing availability untouched)."""

    def _make(listing: Listing, renter: User, status: str = "pending", **fields) -> Rental:
        rental = Rental(
            listing_id=listing.id,
            renter_id=renter.id,
            owner_id=listing.user_id,
            start_date=fields.pop("start_date", datetime(2025, 6, 1, tzinfo=timezone.utc)),
            end_date=fields.pop("end_date", datetime(2025, 6, 4, tzinfo=timezone.utc)),
            total_price=fields.pop("total_price", Decimal("37.50")),
            status=status,
            **fields,
        )
        session.add(rental)
        session.commit()
        session.refresh(rental)
        return rental

    return _make


@pytest.fixture
def client(session):
    def _get_session_override():
        yield session

    app.dependency_overrides[get_session] = _get_session_override
    # Not used as a context manager: lifespan (create_all on the app engine)
    # is not needed here.
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Make `user` the caller of subsequent requests (None = guest)."""

    def _login(user: User | None) -> None:
        app.dependency_overrides[get_current_user] = lambda: user

    return _login
