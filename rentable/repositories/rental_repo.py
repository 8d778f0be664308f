# rentable/repositories/rental_repo.py
import uuid

from sqlmodel import Session, select

from rentable.models.rental import Rental, Review

ACTIVE_STATUSES = ("pending", "confirmed", "in_progress")


class RentalRepository:
    """
    Data access layer for rentals and reviews.

    NOTE:
      - No commits for rentals; creation and status changes move the listing's
        availability in the same transaction. The service calls session.commit().
    """

    # ---- Rentals ----

    def get_by_id(self, session: Session, rental_id: uuid.UUID) -> Rental | None:
        return session.get(Rental, rental_id)

    def list_for_renter(
        self,
        session: Session,
        renter_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Rental]:
        stmt = (
            select(Rental)
            .where(Rental.renter_id == renter_id)
            .order_by(Rental.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_for_owner(
        self,
        session: Session,
        owner_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Rental]:
        stmt = (
            select(Rental)
            .where(Rental.owner_id == owner_id)
            .order_by(Rental.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Rental]:
        stmt = select(Rental).order_by(Rental.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def has_any_for_listing(self, session: Session, listing_id: uuid.UUID) -> bool:
        stmt = select(Rental.id).where(Rental.listing_id == listing_id)
        return session.exec(stmt).first() is not None

    def has_active_for_listing(self, session: Session, listing_id: uuid.UUID) -> bool:
        stmt = select(Rental.id).where(
            Rental.listing_id == listing_id,
            Rental.status.in_(ACTIVE_STATUSES),
        )
        return session.exec(stmt).first() is not None

    def create(self, session: Session, rental: Rental) -> Rental:
        """
        Insert a Rental without committing, but ensure id is populated.
        """
        session.add(rental)
        session.flush()
        return rental

    def update(self, session: Session, rental: Rental) -> Rental:
        session.add(rental)
        session.flush()
        return rental

    # ---- Reviews ----

    def get_review(
        self,
        session: Session,
        rental_id: uuid.UUID,
        from_user_id: uuid.UUID,
    ) -> Review | None:
        stmt = select(Review).where(
            Review.rental_id == rental_id,
            Review.from_user_id == from_user_id,
        )
        return session.exec(stmt).first()

    def list_reviews_for_listing(self, session: Session, listing_id: uuid.UUID) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.listing_id == listing_id)
            .order_by(Review.created_at.desc())
        )
        return session.exec(stmt).all()

    def list_reviews_for_user(self, session: Session, user_id: uuid.UUID) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.to_user_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return session.exec(stmt).all()

    def create_review(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review
