# rentable/services/token_service.py
import logging
import uuid

from sqlmodel import Session

from rentable.core.errors import InsufficientBalance, InvalidInput, NotFound
from rentable.models.token import TokenTransaction
from rentable.repositories.token_repo import TokenRepository

logger = logging.getLogger(__name__)

CREDIT_TYPES = {"purchase", "earn", "refund", "bonus"}


class TokenService:
    """
    Token ledger.

    Invariant: for every user, users.token_balance equals the sum of that
    user's token_transactions.amount. Every credit/debit writes exactly one
    ledger row and moves the cached balance by the same delta, in one
    transaction.

    `commit=False` lets a caller (listing creation, payment webhook) fold the
    ledger write into its own transaction.
    """

    def __init__(self, repo: TokenRepository):
        self.repo = repo

    def credit(
        self,
        session: Session,
        user_id: uuid.UUID,
        amount: int,
        type: str,
        description: str,
        related_id: uuid.UUID | None = None,
        *,
        commit: bool = True,
    ) -> TokenTransaction:
        """
        Add tokens to a user's balance.

        Raises:
            InvalidInput: non-positive amount or a debit type.
            NotFound: unknown user.
        """
        if amount <= 0:
            raise InvalidInput("Credit amount must be positive")
        if type not in CREDIT_TYPES:
            raise InvalidInput(f"Invalid credit type: {type}")

        return self._apply(session, user_id, amount, type, description, related_id, commit)

    def debit(
        self,
        session: Session,
        user_id: uuid.UUID,
        amount: int,
        description: str,
        related_id: uuid.UUID | None = None,
        *,
        commit: bool = True,
    ) -> TokenTransaction:
        """
        Spend tokens.

        Raises:
            InvalidInput: non-positive amount.
            InsufficientBalance: balance < amount (nothing is written).
            NotFound: unknown user.
        """
        if amount <= 0:
            raise InvalidInput("Debit amount must be positive")

        return self._apply(session, user_id, -amount, "spend", description, related_id, commit)

    def balance(self, session: Session, user_id: uuid.UUID) -> int:
        value = self.repo.get_balance(session, user_id)
        if value is None:
            raise NotFound("User not found")
        return value

    def history(self, session: Session, user_id: uuid.UUID, limit: int = 100) -> list[TokenTransaction]:
        """Ledger entries, newest first."""
        return self.repo.list_for_user(session, user_id, limit=limit)

    def ledger_sum(self, session: Session, user_id: uuid.UUID) -> int:
        return self.repo.ledger_sum(session, user_id)

    # ---- internal ----

    def _apply(
        self,
        session: Session,
        user_id: uuid.UUID,
        delta: int,
        type: str,
        description: str,
        related_id: uuid.UUID | None,
        commit: bool,
    ) -> TokenTransaction:
        if not self.repo.apply_delta(session, user_id, delta):
            if self.repo.get_balance(session, user_id) is None:
                raise NotFound("User not found")
            raise InsufficientBalance("Insufficient tokens")

        entry = self.repo.add_transaction(
            session,
            TokenTransaction(
                user_id=user_id,
                amount=delta,
                type=type,
                description=description[:255],
                related_id=related_id,
            ),
        )

        if commit:
            session.commit()
            session.refresh(entry)

        logger.info("Token %s %+d for user %s (%s)", type, delta, user_id, description)
        return entry
