# rentable/routers/reviews.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.rental import ReviewCreate, ReviewRead
from rentable.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])

service = ReviewService(RentalRepository())


@router.post(
    "",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Review the other side of a completed rental.

    - renter_to_owner: caller must be the renter
    - owner_to_renter: caller must be the owner
    - one review per direction per rental
    """
    return service.create_review(session, current_user, payload)
