# rentable/repositories/barter_repo.py
import uuid

from sqlalchemy import or_
from sqlmodel import Session, select

from rentable.models.barter import BarterOffer


class BarterRepository:
    """Data access layer for barter offers."""

    def get_by_id(self, session: Session, offer_id: uuid.UUID) -> BarterOffer | None:
        return session.get(BarterOffer, offer_id)

    def list_for_listing(self, session: Session, listing_id: uuid.UUID) -> list[BarterOffer]:
        stmt = (
            select(BarterOffer)
            .where(BarterOffer.listing_id == listing_id)
            .order_by(BarterOffer.created_at.desc())
        )
        return session.exec(stmt).all()

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[BarterOffer]:
        """Offers the user sent or received."""
        stmt = (
            select(BarterOffer)
            .where(or_(BarterOffer.from_user_id == user_id, BarterOffer.to_user_id == user_id))
            .order_by(BarterOffer.created_at.desc())
        )
        return session.exec(stmt).all()

    def create(self, session: Session, offer: BarterOffer) -> BarterOffer:
        session.add(offer)
        session.commit()
        session.refresh(offer)
        return offer

    def update(self, session: Session, offer: BarterOffer) -> BarterOffer:
        session.add(offer)
        session.commit()
        session.refresh(offer)
        return offer
