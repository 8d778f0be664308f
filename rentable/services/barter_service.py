# rentable/services/barter_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from rentable.core.errors import Conflict, Forbidden, NotFound
from rentable.models.barter import BarterOffer
from rentable.models.user import User
from rentable.repositories.barter_repo import BarterRepository
from rentable.repositories.listing_repo import ListingRepository
from rentable.schemas.barter import BarterOfferCreate, BarterStatusUpdate

logger = logging.getLogger(__name__)


class BarterService:
    """
    Barter offers against barter-enabled listings.

      pending  -> accepted | rejected   (recipient only)
      accepted -> completed             (either party)
      rejected, completed               terminal
    """

    ALLOWED_TRANSITIONS: dict[str, set[str]] = {
        "pending": {"accepted", "rejected"},
        "accepted": {"completed"},
        "rejected": set(),
        "completed": set(),
    }

    def __init__(self, repo: BarterRepository, listing_repo: ListingRepository):
        self.repo = repo
        self.listing_repo = listing_repo

    def create_offer(self, session: Session, user: User, payload: BarterOfferCreate) -> BarterOffer:
        listing = self.listing_repo.get_by_id(session, payload.listing_id)
        if not listing:
            raise NotFound("Listing not found")
        if not listing.is_barter_enabled:
            raise Conflict("This listing does not accept barter offers")
        if listing.is_removed or listing.availability == "unavailable":
            raise Conflict("Listing is not on the market")
        if listing.user_id == user.id:
            raise Conflict("You cannot make an offer on your own listing")

        offer = BarterOffer(
            listing_id=listing.id,
            from_user_id=user.id,
            to_user_id=listing.user_id,
            offered_item_description=payload.offered_item_description,
            offered_item_value=payload.offered_item_value,
            message=payload.message,
            status="pending",
        )
        offer = self.repo.create(session, offer)
        logger.info("Barter offer %s on listing %s from %s", offer.id, listing.id, user.id)
        return offer

    def update_status(
        self,
        session: Session,
        user: User,
        offer_id: uuid.UUID,
        payload: BarterStatusUpdate,
    ) -> BarterOffer:
        offer = self.repo.get_by_id(session, offer_id)
        if not offer:
            raise NotFound("Barter offer not found")

        if user.id not in (offer.from_user_id, offer.to_user_id):
            raise Forbidden("Not a party to this offer")

        current = offer.status
        new = payload.status
        if new not in self.ALLOWED_TRANSITIONS.get(current, set()):
            raise Conflict(f"Invalid status transition: {current} -> {new}")

        if new in ("accepted", "rejected") and user.id != offer.to_user_id:
            raise Forbidden("Only the listing owner can accept or reject an offer")

        offer.status = new
        offer.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, offer)

    def list_for_listing(self, session: Session, listing_id: uuid.UUID) -> list[BarterOffer]:
        return self.repo.list_for_listing(session, listing_id)

    def list_mine(self, session: Session, user: User) -> list[BarterOffer]:
        return self.repo.list_for_user(session, user.id)
