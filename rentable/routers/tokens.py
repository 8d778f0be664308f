# rentable/routers/tokens.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.token_repo import TokenRepository
from rentable.schemas.token import TokenBalance, TokenSpend, TokenTransactionRead
from rentable.services.token_service import TokenService

router = APIRouter(prefix="/tokens", tags=["Tokens"])

service = TokenService(TokenRepository())


@router.get("/balance", response_model=TokenBalance)
def get_balance(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return TokenBalance(balance=service.balance(session, current_user.id))


@router.get("/history", response_model=list[TokenTransactionRead])
def get_history(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Ledger entries, newest first."""
    return service.history(session, current_user.id)


@router.post("/spend", response_model=TokenBalance)
def spend_tokens(
    payload: TokenSpend,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Spend tokens on a platform feature.

    409 (InsufficientBalance) if the balance is too low; nothing is written.
    """
    service.debit(session, current_user.id, payload.amount, payload.description)
    return TokenBalance(balance=service.balance(session, current_user.id))
