# rentable/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from rentable.models.listing import Listing
from rentable.models.rental import Rental
from rentable.models.support import SupportTicket
from rentable.models.user import User


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_users(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User)
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_listings(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Listing)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_rentals(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Rental)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_open_tickets(self, session: Session) -> int:
        stmt = (
            select(func.count())
            .select_from(SupportTicket)
            .where(SupportTicket.status == "open")
        )
        value = session.exec(stmt).one()
        return int(value or 0)
