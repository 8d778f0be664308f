# rentable/routers/barter.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.barter_repo import BarterRepository
from rentable.repositories.listing_repo import ListingRepository
from rentable.schemas.barter import BarterOfferCreate, BarterOfferRead, BarterStatusUpdate
from rentable.services.barter_service import BarterService

router = APIRouter(prefix="/barter", tags=["Barter"])

service = BarterService(BarterRepository(), ListingRepository())


@router.post(
    "",
    response_model=BarterOfferRead,
    status_code=status.HTTP_201_CREATED,
)
def create_offer(
    payload: BarterOfferCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Offer an item in trade for a barter-enabled listing.
    """
    return service.create_offer(session, current_user, payload)


@router.get("/me", response_model=list[BarterOfferRead])
def list_my_offers(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Offers the caller sent or received."""
    return service.list_mine(session, current_user)


@router.patch("/{offer_id}/status", response_model=BarterOfferRead)
def update_offer_status(
    offer_id: uuid.UUID,
    payload: BarterStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    - accepted / rejected: listing owner, from pending
    - completed: either party, from accepted
    """
    return service.update_status(session, current_user, offer_id, payload)
