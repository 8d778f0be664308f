# rentable/routers/support.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from rentable.core.auth import get_current_user, require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.support_repo import SupportRepository
from rentable.schemas.support import SupportTicketCreate, SupportTicketRead
from rentable.services.support_service import SupportService

router = APIRouter(prefix="/support", tags=["Support"])

service = SupportService(SupportRepository())


@router.post(
    "",
    response_model=SupportTicketRead,
    status_code=status.HTTP_201_CREATED,
)
def create_ticket(
    payload: SupportTicketCreate,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Contact support. Guests allowed.
    """
    return service.create_ticket(session, payload, current_user)


@router.get("/me", response_model=list[SupportTicketRead])
def list_my_tickets(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.list_mine(session, current_user)
