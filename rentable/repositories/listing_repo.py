# rentable/repositories/listing_repo.py
import uuid

from sqlalchemy import func, update
from sqlmodel import Session, select

from rentable.models.listing import Listing


class ListingRepository:
    """
    Data access layer for Listing.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, listing_id: uuid.UUID) -> Listing | None:
        return session.get(Listing, listing_id)

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Listing]:
        stmt = (
            select(Listing)
            .where(Listing.user_id == user_id)
            .order_by(Listing.created_at.desc())
        )
        return session.exec(stmt).all()

    def search(
        self,
        session: Session,
        *,
        category: str | None = None,
        zip_code: str | None = None,
        is_emergency: bool | None = None,
        is_weird: bool | None = None,
        query: str | None = None,
        limit: int = 50,
    ) -> list[Listing]:
        """
        Available listings narrowed by optional filters, newest first.
        """
        stmt = select(Listing).where(
            Listing.availability == "available",
            Listing.is_removed == False,  # noqa: E712
        )
        if category:
            stmt = stmt.where(Listing.category == category)
        if zip_code:
            stmt = stmt.where(Listing.zip_code == zip_code)
        if is_emergency is not None:
            stmt = stmt.where(Listing.is_emergency == is_emergency)
        if is_weird is not None:
            stmt = stmt.where(Listing.is_weird == is_weird)
        if query:
            stmt = stmt.where(
                func.lower(Listing.title).contains(query.lower(), autoescape=True)
            )
        stmt = stmt.order_by(Listing.created_at.desc()).limit(limit)
        return session.exec(stmt).all()

    def list_all(self, session: Session, skip: int = 0, limit: int = 50) -> list[Listing]:
        stmt = select(Listing).order_by(Listing.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def list_flagged(self, session: Session) -> list[Listing]:
        stmt = (
            select(Listing)
            .where(Listing.is_flagged == True)  # noqa: E712
            .order_by(Listing.created_at.desc())
        )
        return session.exec(stmt).all()

    def create(self, session: Session, listing: Listing) -> Listing:
        """Insert without committing; the service commits with its side effects."""
        session.add(listing)
        session.flush()
        return listing

    def update(self, session: Session, listing: Listing) -> Listing:
        session.add(listing)
        session.commit()
        session.refresh(listing)
        return listing

    def delete(self, session: Session, listing: Listing) -> None:
        session.delete(listing)
        session.commit()

    def increment_views(self, session: Session, listing_id: uuid.UUID) -> None:
        stmt = (
            update(Listing)
            .where(Listing.id == listing_id)
            .values(view_count=Listing.view_count + 1)
        )
        session.exec(stmt)  # type: ignore[call-overload]
        session.commit()

    # ----- Availability (no commits) -----

    def reserve(self, session: Session, listing_id: uuid.UUID) -> bool:
        """
        Atomically flip a listing from available to rented.

        Returns False if the listing was not available at the time of the
        update (someone else reserved it, or it was withdrawn).
        """
        stmt = (
            update(Listing)
            .where(Listing.id == listing_id, Listing.availability == "available")
            .values(availability="rented")
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    def release(self, session: Session, listing_id: uuid.UUID) -> None:
        """Put a rented listing back on the market (unavailable ones stay put)."""
        stmt = (
            update(Listing)
            .where(Listing.id == listing_id, Listing.availability == "rented")
            .values(availability="available")
        )
        session.exec(stmt)  # type: ignore[call-overload]
