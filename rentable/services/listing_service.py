# rentable/services/listing_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable

from sqlmodel import Session

from rentable.core.config import get_settings
from rentable.core.errors import Conflict, Forbidden, InvalidInput, NotFound
from rentable.core.notifications import notify_owner
from rentable.core.storage_utils import delete_public_url, generate_filename, upload_to_storage
from rentable.models.listing import Listing
from rentable.models.user import User
from rentable.repositories.barter_repo import BarterRepository
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.listing import ListingCreate, ListingSearch, ListingUpdate
from rentable.services.token_service import TokenService

logger = logging.getLogger(__name__)
settings = get_settings()

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image
MAX_IMAGES_PER_LISTING = 10

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ListingService:
    """
    Business logic for the listing catalog.

    Responsibilities:
      - validation beyond pydantic (ownership, availability rules)
      - token reward + owner notification on new listings
      - search visibility (only available listings are returned)
      - moderation (flag / approve / remove)
      - image upload orchestration with Supabase Storage
    """

    def __init__(
        self,
        repo: ListingRepository,
        rental_repo: RentalRepository,
        barter_repo: BarterRepository,
        tokens: TokenService,
    ):
        self.repo = repo
        self.rental_repo = rental_repo
        self.barter_repo = barter_repo
        self.tokens = tokens

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise InvalidInput("Unsupported image type. Allowed: JPEG, PNG, WEBP.")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise InvalidInput("Image too large (max 5MB).")

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    @staticmethod
    def _ensure_owner(listing: Listing, user: User) -> None:
        if listing.user_id != user.id:
            raise Forbidden("Only the owner can modify this listing")

    # ----- Reads -----

    def get_listing(self, session: Session, listing_id: uuid.UUID) -> Listing:
        listing = self.repo.get_by_id(session, listing_id)
        if not listing:
            raise NotFound("Listing not found")
        return listing

    def view_listing(self, session: Session, listing_id: uuid.UUID) -> Listing:
        """
        Detail fetch. Bumps the view counter (at-least-once, not exact).
        """
        listing = self.get_listing(session, listing_id)
        self.repo.increment_views(session, listing_id)
        session.refresh(listing)
        return listing

    def search(self, session: Session, filters: ListingSearch) -> list[Listing]:
        return self.repo.search(
            session,
            category=filters.category,
            zip_code=filters.zip_code,
            is_emergency=filters.is_emergency,
            is_weird=filters.is_weird,
            query=filters.query.strip() if filters.query else None,
            limit=filters.limit,
        )

    def my_listings(self, session: Session, user: User) -> list[Listing]:
        return self.repo.list_for_user(session, user.id)

    # ----- Owner operations -----

    def create_listing(
        self,
        session: Session,
        owner: User,
        payload: ListingCreate,
    ) -> Listing:
        """
        Create a new listing for `owner`.

        - availability = 'available', is_verified = False
        - LISTING_REWARD_TOKENS credited in the same transaction
        - platform owner notified after commit
        """
        listing = Listing(
            user_id=owner.id,
            title=payload.title,
            description=payload.description,
            category=payload.category,
            price_per_day=payload.price_per_day,
            fair_value_price=payload.fair_value_price,
            location=payload.location,
            zip_code=payload.zip_code,
            condition=payload.condition,
            images=list(payload.images),
            specs=dict(payload.specs),
            is_emergency=payload.is_emergency,
            is_weird=payload.is_weird,
            is_barter_enabled=payload.is_barter_enabled,
            is_delivery_available=payload.is_delivery_available,
            co2_saved_per_rental=payload.co2_saved_per_rental,
        )
        listing = self.repo.create(session, listing)

        if settings.LISTING_REWARD_TOKENS > 0:
            self.tokens.credit(
                session,
                owner.id,
                settings.LISTING_REWARD_TOKENS,
                "earn",
                f'Listed "{listing.title}"',
                related_id=listing.id,
                commit=False,
            )

        session.commit()
        session.refresh(listing)

        notify_owner(
            "New Listing Created",
            f'{owner.display_name or owner.name} listed "{listing.title}" '
            f"for ${listing.price_per_day}/day",
        )
        return listing

    def update_listing(
        self,
        session: Session,
        user: User,
        listing_id: uuid.UUID,
        payload: ListingUpdate,
        *,
        as_admin: bool = False,
    ) -> Listing:
        """
        Partial update of a listing.

        - Owner only, unless as_admin.
        - availability can only be set to available/unavailable, and not while
          the listing has a rental in flight.
        """
        listing = self.get_listing(session, listing_id)
        if not as_admin:
            self._ensure_owner(listing, user)

        data = payload.model_dump(exclude_unset=True)

        if listing.is_removed and not as_admin:
            raise Forbidden("Listing was removed by an admin")

        if "availability" in data and data["availability"] != listing.availability:
            if data["availability"] == "rented":
                raise InvalidInput("Listings become rented through rental requests only")
            if self.rental_repo.has_active_for_listing(session, listing.id):
                raise Conflict("Listing has an active rental; availability cannot change")

        for field, value in data.items():
            if value is None and field not in ("description", "zip_code"):
                continue
            setattr(listing, field, value)

        listing.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, listing)

    def delete_listing(
        self,
        session: Session,
        user: User,
        listing_id: uuid.UUID,
        *,
        as_admin: bool = False,
    ) -> None:
        """
        Hard-delete a listing that never had rentals or offers, and clean up its images
        in Storage. Listings with history must be marked unavailable
        instead.
        """
        listing = self.get_listing(session, listing_id)
        if not as_admin:
            self._ensure_owner(listing, user)

        if self.rental_repo.has_any_for_listing(session, listing.id):
            raise Conflict("Listing has rental history; mark it unavailable instead")
        if self.barter_repo.list_for_listing(session, listing.id):
            raise Conflict("Listing has barter offers; mark it unavailable instead")

        for url in listing.images:
            delete_public_url(url)

        self.repo.delete(session, listing)

    def add_images(
        self,
        session: Session,
        user: User,
        listing_id: uuid.UUID,
        files: Iterable[tuple[str, bytes]],
    ) -> Listing:
        """
        Upload one or more images and append their public URLs.

        Args:
            files: iterable of (content_type, file_bytes)
        """
        listing = self.get_listing(session, listing_id)
        self._ensure_owner(listing, user)

        files = list(files)
        if len(listing.images) + len(files) > MAX_IMAGES_PER_LISTING:
            raise InvalidInput(f"A listing can have at most {MAX_IMAGES_PER_LISTING} images")

        urls: list[str] = []
        for content_type, file_bytes in files:
            ext = self._validate_and_get_ext(content_type, file_bytes)
            path = f"listings/{listing.id}/{generate_filename(ext)}"
            urls.append(upload_to_storage(path, file_bytes, content_type))

        # Reassign so the JSON column is marked dirty
        listing.images = [*listing.images, *urls]
        listing.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, listing)

    # ----- Moderation -----

    def flag(self, session: Session, listing_id: uuid.UUID, reason: str) -> Listing:
        """Any authenticated user may flag a listing for review."""
        listing = self.get_listing(session, listing_id)
        listing.is_flagged = True
        listing.flag_reason = reason
        listing.updated_at = datetime.now(timezone.utc)
        logger.info("Listing %s flagged: %s", listing_id, reason)
        return self.repo.update(session, listing)

    def approve(self, session: Session, listing_id: uuid.UUID) -> Listing:
        """Admin: mark verified, clear any flag and lift a removal."""
        listing = self.get_listing(session, listing_id)
        listing.is_verified = True
        listing.is_flagged = False
        listing.flag_reason = None
        listing.is_removed = False
        listing.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, listing)

    def remove(self, session: Session, listing_id: uuid.UUID, reason: str) -> Listing:
        """Admin: take a listing off the market and keep it flagged."""
        listing = self.get_listing(session, listing_id)
        listing.availability = "unavailable"
        listing.is_flagged = True
        listing.is_removed = True
        listing.flag_reason = reason
        listing.updated_at = datetime.now(timezone.utc)
        logger.info("Listing %s removed by admin: %s", listing_id, reason)
        return self.repo.update(session, listing)

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Listing]:
        return self.repo.list_all(session, skip=skip, limit=limit)

    def list_flagged(self, session: Session) -> list[Listing]:
        return self.repo.list_flagged(session)
