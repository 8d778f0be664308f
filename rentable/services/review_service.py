# rentable/services/review_service.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from rentable.core.errors import Conflict, Forbidden, NotFound
from rentable.models.rental import Review
from rentable.models.user import User
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.rental import ReviewCreate


class ReviewService:
    """
    Reviews are left by a rental's participants once the rental is completed,
    one per direction.
    """

    def __init__(self, rental_repo: RentalRepository):
        self.rental_repo = rental_repo

    def create_review(self, session: Session, author: User, payload: ReviewCreate) -> Review:
        """
        Raises:
            NotFound: rental does not exist.
            Forbidden: caller is not the side named by review_type.
            Conflict: rental not completed, or already reviewed in this direction.
        """
        rental = self.rental_repo.get_by_id(session, payload.rental_id)
        if not rental:
            raise NotFound("Rental not found")

        if payload.review_type == "renter_to_owner":
            if author.id != rental.renter_id:
                raise Forbidden("Only the renter can review the owner")
            target_id = rental.owner_id
        else:
            if author.id != rental.owner_id:
                raise Forbidden("Only the owner can review the renter")
            target_id = rental.renter_id

        if rental.status != "completed":
            raise Conflict("Only completed rentals can be reviewed")

        if self.rental_repo.get_review(session, rental.id, author.id):
            raise Conflict("You have already reviewed this rental")

        review = Review(
            rental_id=rental.id,
            listing_id=rental.listing_id,
            from_user_id=author.id,
            to_user_id=target_id,
            rating=payload.rating,
            comment=payload.comment,
            review_type=payload.review_type,
        )
        try:
            return self.rental_repo.create_review(session, review)
        except IntegrityError:
            session.rollback()
            raise Conflict("You have already reviewed this rental")

    def list_for_listing(self, session: Session, listing_id: uuid.UUID) -> list[Review]:
        return self.rental_repo.list_reviews_for_listing(session, listing_id)

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Review]:
        return self.rental_repo.list_reviews_for_user(session, user_id)
