# rentable/repositories/token_repo.py
import uuid

from sqlalchemy import func, update
from sqlmodel import Session, select

from rentable.models.token import TokenTransaction
from rentable.models.user import User


class TokenRepository:
    """
    Data access layer for the token ledger.

    NOTE:
      - No commits here. A ledger entry and the balance move it implies must
        land in the same transaction; TokenService owns the commit.
    """

    def apply_delta(self, session: Session, user_id: uuid.UUID, delta: int) -> bool:
        """
        Move users.token_balance by delta in a single conditional UPDATE.

        The balance is incremented in SQL (no read-modify-write), and the
        WHERE clause refuses any change that would leave it negative.

        Returns:
            True if the row was updated, False if the user is missing or the
            balance is insufficient.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.token_balance + delta >= 0)
            .values(token_balance=User.token_balance + delta)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    def add_transaction(self, session: Session, entry: TokenTransaction) -> TokenTransaction:
        session.add(entry)
        session.flush()
        return entry

    def get_balance(self, session: Session, user_id: uuid.UUID) -> int | None:
        stmt = select(User.token_balance).where(User.id == user_id)
        return session.exec(stmt).first()

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        limit: int = 100,
    ) -> list[TokenTransaction]:
        stmt = (
            select(TokenTransaction)
            .where(TokenTransaction.user_id == user_id)
            .order_by(TokenTransaction.created_at.desc())
            .limit(limit)
        )
        return session.exec(stmt).all()

    def ledger_sum(self, session: Session, user_id: uuid.UUID) -> int:
        stmt = select(func.coalesce(func.sum(TokenTransaction.amount), 0)).where(
            TokenTransaction.user_id == user_id
        )
        value = session.exec(stmt).one()
        return int(value or 0)
