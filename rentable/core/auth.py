# rentable/core/auth.py
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from rentable.core.config import get_settings
from rentable.core.errors import Forbidden, Unauthenticated
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.token_repo import TokenRepository
from rentable.repositories.user_repo import UserRepository
from rentable.services.token_service import TokenService
from rentable.services.user_service import UserService

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)

user_service = UserService(UserRepository(), TokenService(TokenRepository()))


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        Unauthenticated: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from a Supabase JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Convert 'sub' to UUID to match User.id type.
      4. Find user profile, auto-provisioning it on first login.

    Raises:
        Unauthenticated: if token is malformed or missing required claims.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise Unauthenticated("Token missing sub/email")

    # Supabase provides sub as a string; enforce UUID
    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise Unauthenticated("Invalid sub in token")

    return user_service.get_or_provision(session, sub_uuid, email)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Guests (missing JWT) are rejected with 401, banned accounts with 403.
    """
    if user is None:
        raise Unauthenticated("Authentication required")
    if user.is_banned:
        raise Forbidden("Account is banned")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Raises:
        Forbidden: if role is not admin.
    """
    if user.role != "admin":
        raise Forbidden("Admin access required")
    return user
