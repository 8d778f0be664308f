# rentable/repositories/support_repo.py
import uuid

from sqlmodel import Session, select

from rentable.models.support import SupportTicket


class SupportRepository:
    """Data access layer for support tickets."""

    def get_by_id(self, session: Session, ticket_id: uuid.UUID) -> SupportTicket | None:
        return session.get(SupportTicket, ticket_id)

    def list_tickets(self, session: Session, status: str | None = None) -> list[SupportTicket]:
        stmt = select(SupportTicket)
        if status:
            stmt = stmt.where(SupportTicket.status == status)
        stmt = stmt.order_by(SupportTicket.created_at.desc())
        return session.exec(stmt).all()

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[SupportTicket]:
        stmt = (
            select(SupportTicket)
            .where(SupportTicket.user_id == user_id)
            .order_by(SupportTicket.created_at.desc())
        )
        return session.exec(stmt).all()

    def create(self, session: Session, ticket: SupportTicket) -> SupportTicket:
        session.add(ticket)
        session.commit()
        session.refresh(ticket)
        return ticket

    def update(self, session: Session, ticket: SupportTicket) -> SupportTicket:
        session.add(ticket)
        session.commit()
        session.refresh(ticket)
        return ticket
