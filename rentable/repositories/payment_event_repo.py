# rentable/repositories/payment_event_repo.py
from sqlmodel import Session

from rentable.models.payment import PaymentEvent


class PaymentEventRepository:
    """
    Processed webhook event ids. No commits: the row must be written in the
    same transaction as the event's effects.
    """

    def exists(self, session: Session, event_id: str) -> bool:
        return session.get(PaymentEvent, event_id) is not None

    def record(self, session: Session, event_id: str, event_type: str) -> PaymentEvent:
        """
        Insert the event id. Raises IntegrityError on flush if another
        delivery of the same event got there first.
        """
        event = PaymentEvent(event_id=event_id, type=event_type)
        session.add(event)
        session.flush()
        return event
