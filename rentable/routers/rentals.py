# rentable/routers/rentals.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.rental import (
    DamageReport,
    RentalCreate,
    RentalRead,
    RentalStatusUpdate,
)
from rentable.services.rental_service import RentalService

router = APIRouter(prefix="/rentals", tags=["Rentals"])

service = RentalService(RentalRepository(), ListingRepository())


@router.post(
    "",
    response_model=RentalRead,
    status_code=status.HTTP_201_CREATED,
)
def create_rental(
    payload: RentalCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Request a rental.

    - Listing must be available; it is reserved (rented) immediately.
    - total_price = price_per_day x whole days (rounded up, min 1).
    - Starts as status=pending, payment_status=pending.
    """
    return service.create_rental(session, current_user, payload)


@router.get("/me", response_model=list[RentalRead])
def list_my_rentals(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """Rentals where the caller is the renter."""
    return service.list_my_rentals(session, current_user, skip, limit)


@router.get("/owned", response_model=list[RentalRead])
def list_owned_rentals(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """Rentals of the caller's listings."""
    return service.list_owned_rentals(session, current_user, skip, limit)


@router.get("/{rental_id}", response_model=RentalRead)
def get_rental(
    rental_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Participants and admins only."""
    return service.get_rental(session, current_user, rental_id)


@router.patch("/{rental_id}/status", response_model=RentalRead)
def update_rental_status(
    rental_id: uuid.UUID,
    payload: RentalStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Advance or cancel a rental.

      confirmed -> in_progress -> completed : owner
      pending / confirmed -> canceled       : owner or renter

    Confirmation happens through payment only.
    """
    return service.update_status(session, current_user, rental_id, payload)


@router.post("/{rental_id}/damage", response_model=RentalRead)
def report_damage(
    rental_id: uuid.UUID,
    payload: DamageReport,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Report damage on a started or completed rental (participants only)."""
    return service.report_damage(session, current_user, rental_id, payload)
