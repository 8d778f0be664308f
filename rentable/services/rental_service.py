# rentable/services/rental_service.py
import logging
import math
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlmodel import Session

from rentable.core.errors import Conflict, Forbidden, InvalidInput, NotFound
from rentable.core.notifications import notify_owner
from rentable.models.rental import Rental
from rentable.models.user import User
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.rental import DamageReport, RentalCreate, RentalStatusUpdate

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
CENTS = Decimal("0.01")

# Legal status moves. "confirmed" is only reached through payment.
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"canceled"},
    "confirmed": {"in_progress", "canceled"},
    "in_progress": {"completed"},
    "completed": set(),
    "canceled": set(),
}

# Which participant may request each target status (admins may request any).
TRANSITION_ACTORS: dict[str, set[str]] = {
    "in_progress": {"owner"},
    "completed": {"owner"},
    "canceled": {"owner", "renter"},
}

# Statuses after which the listing goes back on the market
RELEASING_STATUSES = {"completed", "canceled"}


def rental_days(start: datetime, end: datetime) -> int:
    """Whole days covered by [start, end), rounded up, minimum 1."""
    return max(1, math.ceil((end - start) / ONE_DAY))


def rental_total(price_per_day: Decimal, days: int) -> Decimal:
    return (Decimal(price_per_day) * days).quantize(CENTS, rounding=ROUND_HALF_UP)


class RentalService:
    """
    Rental lifecycle.

      pending -> confirmed -> in_progress -> completed
      pending | confirmed -> canceled

    Responsibilities:
      - create a rental request and reserve the listing atomically
      - price the rental (whole days x price per day, cents half-up)
      - authorize each status move against the rental's stored participants
      - put the listing back on the market on completion / cancellation
      - apply payment confirmation (called by the payment webhook only)
    """

    def __init__(self, repo: RentalRepository, listing_repo: ListingRepository):
        self.repo = repo
        self.listing_repo = listing_repo

    # -------- Renter operations --------

    def create_rental(
        self,
        session: Session,
        renter: User,
        payload: RentalCreate,
    ) -> Rental:
        """
        Request a rental of a listing.

        Steps:
          1. Listing must exist and must not belong to the renter.
          2. Listing must be available, and end_date > start_date.
          3. Price the rental.
          4. Flip listing available -> rented (conditional update).
          5. Insert the rental (pending / pending) and commit.
          6. Notify the platform owner.
        """
        # 1) Listing checks
        listing = self.listing_repo.get_by_id(session, payload.listing_id)
        if not listing:
            raise NotFound("Listing not found")
        if listing.user_id == renter.id:
            raise Conflict("You cannot rent your own listing")

        # 2) Availability and dates
        if listing.availability != "available":
            raise Conflict("Listing is not available")
        if payload.end_date <= payload.start_date:
            raise InvalidInput("end_date must be after start_date")

        # 3) Price
        days = rental_days(payload.start_date, payload.end_date)
        total = rental_total(listing.price_per_day, days)

        # 4) Reserve; losing a race with another request is a Conflict
        if not self.listing_repo.reserve(session, listing.id):
            session.rollback()
            raise Conflict("Listing is not available")

        # 5) Insert
        rental = Rental(
            listing_id=listing.id,
            renter_id=renter.id,
            owner_id=listing.user_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            total_price=total,
            status="pending",
            payment_status="pending",
            notes=payload.notes,
            meetup_location=payload.meetup_location,
        )
        rental = self.repo.create(session, rental)
        session.commit()
        session.refresh(rental)

        logger.info(
            "Rental %s requested: listing %s, %d day(s), total %s",
            rental.id,
            listing.id,
            days,
            total,
        )

        # 6) Notify
        notify_owner(
            "New Rental Request",
            f'{renter.display_name or renter.name} requested "{listing.title}" '
            f"for {days} day(s), total ${total}",
        )
        return rental

    def list_my_rentals(self, session: Session, user: User, skip: int = 0, limit: int = 50) -> list[Rental]:
        return self.repo.list_for_renter(session, user.id, skip, limit)

    def list_owned_rentals(self, session: Session, user: User, skip: int = 0, limit: int = 50) -> list[Rental]:
        return self.repo.list_for_owner(session, user.id, skip, limit)

    def get_rental(self, session: Session, user: User, rental_id: uuid.UUID) -> Rental:
        """
        Participants (renter / owner) and admins only.
        """
        rental = self._get_or_404(session, rental_id)
        if user.role != "admin" and user.id not in (rental.renter_id, rental.owner_id):
            raise Forbidden("Not a participant in this rental")
        return rental

    # -------- Status changes --------

    def update_status(
        self,
        session: Session,
        user: User,
        rental_id: uuid.UUID,
        payload: RentalStatusUpdate,
    ) -> Rental:
        """
        Move a rental along its lifecycle.

          confirmed -> in_progress -> completed : owner
          pending | confirmed -> canceled       : owner or renter
          admins may perform any legal move

        Raises:
            Forbidden: caller is not allowed to make this move.
            Conflict: the move is not legal from the current status.
        """
        rental = self.get_rental(session, user, rental_id)

        current = rental.status
        new = payload.status

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise Conflict(f"Invalid status transition: {current} -> {new}")

        if user.role != "admin":
            roles = set()
            if user.id == rental.owner_id:
                roles.add("owner")
            if user.id == rental.renter_id:
                roles.add("renter")
            if not roles & TRANSITION_ACTORS[new]:
                raise Forbidden(f"Only the {' or '.join(sorted(TRANSITION_ACTORS[new]))} can do that")

        rental.status = new
        rental.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, rental)

        if new in RELEASING_STATUSES:
            self.listing_repo.release(session, rental.listing_id)

        session.commit()
        session.refresh(rental)
        logger.info("Rental %s: %s -> %s by %s", rental.id, current, new, user.id)
        return rental

    def report_damage(
        self,
        session: Session,
        user: User,
        rental_id: uuid.UUID,
        payload: DamageReport,
    ) -> Rental:
        rental = self.get_rental(session, user, rental_id)
        if rental.status not in ("in_progress", "completed"):
            raise Conflict("Damage can only be reported on started or completed rentals")

        rental.damage_reported = True
        rental.damage_description = payload.description
        rental.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, rental)
        session.commit()
        session.refresh(rental)
        return rental

    # -------- Payment boundary (no commits) --------

    def attach_checkout_session(self, session: Session, rental: Rental, checkout_session_id: str) -> Rental:
        rental.stripe_checkout_session_id = checkout_session_id
        rental.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, rental)
        session.commit()
        session.refresh(rental)
        return rental

    def confirm_payment(
        self,
        session: Session,
        rental_id: uuid.UUID,
        payment_intent_id: str | None = None,
    ) -> bool:
        """
        Mark a rental paid and confirmed together. Caller commits.

        Returns False when the rental does not exist. A rental that already
        left `pending` keeps its status and only records the payment.
        """
        rental = self.repo.get_by_id(session, rental_id)
        if rental is None:
            logger.warning("Payment for unknown rental %s", rental_id)
            return False

        rental.payment_status = "paid"
        if payment_intent_id:
            rental.stripe_payment_intent_id = payment_intent_id
        if rental.status == "pending":
            rental.status = "confirmed"
        else:
            logger.warning("Payment for rental %s in status %s", rental_id, rental.status)
        rental.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, rental)
        return True

    # -------- Admin --------

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Rental]:
        return self.repo.list_all(session, skip, limit)

    # -------- Helpers --------

    def _get_or_404(self, session: Session, rental_id: uuid.UUID) -> Rental:
        rental = self.repo.get_by_id(session, rental_id)
        if not rental:
            raise NotFound("Rental not found")
        return rental
