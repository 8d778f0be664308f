# rentable/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.rental_repo import RentalRepository
from rentable.repositories.token_repo import TokenRepository
from rentable.repositories.user_repo import UserRepository
from rentable.schemas.rental import ReviewRead
from rentable.schemas.user import PublicProfileRead, UserRead, UserUpdate
from rentable.services.review_service import ReviewService
from rentable.services.token_service import TokenService
from rentable.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository(), TokenService(TokenRepository()))
review_service = ReviewService(RentalRepository())


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The profile row is auto-created on first request (auth dependency),
    together with the sign-up token bonus.
    """
    return current_user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Editable: display_name, bio, location, zip_code, phone, accessibility_mode.
    """
    return service.update_me(session, current_user, payload)


# -------- Public --------


@router.get("/{user_id}/public", response_model=PublicProfileRead)
def get_public_profile(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_public_profile(session, user_id)


@router.get("/{user_id}/reviews", response_model=list[ReviewRead])
def list_reviews_for_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Reviews received by a user, newest first."""
    return review_service.list_for_user(session, user_id)
