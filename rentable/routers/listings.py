# rentable/routers/listings.py
import uuid

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.core.errors import InvalidInput
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.barter_repo import BarterRepository
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.repositories.token_repo import TokenRepository
from rentable.schemas.barter import BarterOfferRead
from rentable.schemas.listing import (
    MAX_SEARCH_LIMIT,
    ListingCreate,
    ListingFlag,
    ListingRead,
    ListingSearch,
    ListingUpdate,
)
from rentable.schemas.rental import ReviewRead
from rentable.services.barter_service import BarterService
from rentable.services.listing_service import ListingService
from rentable.services.review_service import ReviewService
from rentable.services.token_service import TokenService

router = APIRouter(prefix="/listings", tags=["Listings"])

listing_repo = ListingRepository()
rental_repo = RentalRepository()
barter_repo = BarterRepository()
service = ListingService(listing_repo, rental_repo, barter_repo, TokenService(TokenRepository()))
review_service = ReviewService(rental_repo)
barter_service = BarterService(barter_repo, listing_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ListingRead])
def search_listings(
    session: Session = Depends(get_session),
    category: str | None = None,
    zip_code: str | None = None,
    is_emergency: bool | None = None,
    is_weird: bool | None = None,
    query: str | None = None,
    limit: int = Query(default=50, ge=1, le=MAX_SEARCH_LIMIT),
):
    """
    Search available listings, newest first.

    Query params (all optional):
      - category, zip_code: exact match
      - is_emergency, is_weird: flag filters
      - query: case-insensitive title substring
      - limit: 1-100, default 50
    """
    filters = ListingSearch(
        category=category,
        zip_code=zip_code,
        is_emergency=is_emergency,
        is_weird=is_weird,
        query=query,
        limit=limit,
    )
    return service.search(session, filters)


@router.get("/mine", response_model=list[ListingRead])
def my_listings(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """All of the caller's listings, whatever their availability."""
    return service.my_listings(session, current_user)


@router.get("/{listing_id}", response_model=ListingRead)
def get_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Listing detail. Each fetch counts as a view.
    """
    return service.view_listing(session, listing_id)


@router.get("/{listing_id}/reviews", response_model=list[ReviewRead])
def list_listing_reviews(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return review_service.list_for_listing(session, listing_id)


@router.get("/{listing_id}/barter-offers", response_model=list[BarterOfferRead])
def list_listing_barter_offers(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return barter_service.list_for_listing(session, listing_id)


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=ListingRead,
    status_code=status.HTTP_201_CREATED,
)
def create_listing(
    payload: ListingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Post a new listing. Earns the owner listing reward tokens.
    """
    return service.create_listing(session, current_user, payload)


@router.patch("/{listing_id}", response_model=ListingRead)
def update_listing(
    listing_id: uuid.UUID,
    payload: ListingUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update a listing (owner only).
    """
    return service.update_listing(session, current_user, listing_id, payload)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_listing(
    listing_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Delete a listing (owner only). Listings with rental history cannot be
    deleted.
    """
    service.delete_listing(session, current_user, listing_id)
    return None


@router.post("/{listing_id}/flag", response_model=ListingRead)
def flag_listing(
    listing_id: uuid.UUID,
    payload: ListingFlag,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Report a listing for moderation."""
    return service.flag(session, listing_id, payload.reason)


@router.post(
    "/{listing_id}/images",
    response_model=ListingRead,
    summary="Upload one or more images for a listing",
)
def upload_listing_images(
    listing_id: uuid.UUID,
    files: list[UploadFile] = File(...),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Upload images for a listing (owner only).

    - Accepts JPEG, PNG, WEBP up to 5MB each.
    - New images are appended to the listing's images.
    """
    if not files:
        raise InvalidInput("No files uploaded")

    payload: list[tuple[str, bytes]] = []
    for f in files:
        if not f.content_type:
            raise InvalidInput("Missing content-type for one of the uploaded files")
        payload.append((f.content_type, f.file.read()))

    return service.add_images(session, current_user, listing_id, payload)
