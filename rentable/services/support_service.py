# rentable/services/support_service.py
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from rentable.core.errors import NotFound
from rentable.core.notifications import notify_owner
from rentable.models.support import SupportTicket
from rentable.models.user import User
from rentable.repositories.support_repo import SupportRepository
from rentable.schemas.support import SupportTicketCreate, SupportTicketUpdate


class SupportService:
    def __init__(self, repo: SupportRepository):
        self.repo = repo

    def create_ticket(
        self,
        session: Session,
        payload: SupportTicketCreate,
        user: User | None = None,
    ) -> SupportTicket:
        """
        File a ticket. Guests allowed; the ticket is linked to the caller
        when authenticated.
        """
        ticket = SupportTicket(
            user_id=user.id if user else None,
            name=payload.name,
            email=payload.email,
            subject=payload.subject,
            message=payload.message,
            category=payload.category,
        )
        ticket = self.repo.create(session, ticket)

        notify_owner(
            "New Support Ticket",
            f"[{ticket.category}] {ticket.subject} from {ticket.name} <{ticket.email}>",
        )
        return ticket

    def list_mine(self, session: Session, user: User) -> list[SupportTicket]:
        return self.repo.list_for_user(session, user.id)

    # ----- Admin -----

    def list_tickets(self, session: Session, status: str | None = None) -> list[SupportTicket]:
        return self.repo.list_tickets(session, status=status)

    def update_ticket(
        self,
        session: Session,
        ticket_id: uuid.UUID,
        payload: SupportTicketUpdate,
    ) -> SupportTicket:
        ticket = self.repo.get_by_id(session, ticket_id)
        if not ticket:
            raise NotFound("Ticket not found")

        data = payload.model_dump(exclude_unset=True)
        for field, value in data.items():
            if value is None and field != "admin_notes":
                continue
            setattr(ticket, field, value)

        now = datetime.now(timezone.utc)
        if data.get("status") == "resolved":
            ticket.resolved_at = now
        ticket.updated_at = now
        return self.repo.update(session, ticket)
