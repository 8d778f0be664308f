# rentable/services/webhook_service.py
import logging
import uuid
from datetime import datetime, timezone

import stripe
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from rentable.core import stripe_client
from rentable.core.config import get_settings
from rentable.core.errors import InvalidInput
from rentable.models.user import User
from rentable.repositories.payment_event_repo import PaymentEventRepository
from rentable.repositories.user_repo import UserRepository
from rentable.schemas.payment import (
    CheckoutCompleted,
    PaymentEventPayload,
    SubscriptionChanged,
    SubscriptionDeleted,
    UnknownEvent,
    parse_event,
)
from rentable.services.rental_service import RentalService
from rentable.services.token_service import TokenService

logger = logging.getLogger(__name__)
settings = get_settings()


class WebhookService:
    """
    Applies Stripe webhook events to rentals and users.

    Guarantees:
      - bad signature / unparsable body -> InvalidInput (400), nothing written
      - each event id takes effect at most once: the id is inserted into
        payment_events in the same transaction as the effects, so a replay
        (sequential or concurrent) is acknowledged without effects
      - a failure while applying rolls the whole event back; it is logged
        and still acknowledged
    """

    def __init__(
        self,
        events: PaymentEventRepository,
        users: UserRepository,
        rentals: RentalService,
        tokens: TokenService,
    ):
        self.events = events
        self.users = users
        self.rentals = rentals
        self.tokens = tokens

    def handle(self, session: Session, payload: bytes, signature: str | None) -> bool:
        """
        Verify, parse and apply one webhook delivery.

        Returns:
            True if the event's effects were applied, False for replays,
            unknown types and processing failures.
        """
        if not settings.STRIPE_WEBHOOK_SECRET:
            logger.warning("STRIPE_WEBHOOK_SECRET not set; accepting unverified webhook")

        try:
            raw = stripe_client.read_webhook_event(payload, signature)
        except stripe.SignatureVerificationError as e:
            logger.warning("Stripe webhook signature rejected: %s", e)
            raise InvalidInput("Invalid signature")
        except ValueError:
            raise InvalidInput("Invalid payload")

        try:
            event = parse_event(raw)
        except (ValueError, ValidationError) as e:
            logger.warning("Unparsable Stripe event: %s", e)
            raise InvalidInput("Invalid payload")

        logger.info("Stripe event %s (%s)", event.event_id, raw.get("type"))
        return self.apply(session, event)

    def apply(self, session: Session, event: PaymentEventPayload) -> bool:
        if isinstance(event, UnknownEvent):
            logger.info("Ignoring unhandled Stripe event type %s (%s)", event.type, event.event_id)
            return False

        if self.events.exists(session, event.event_id):
            logger.info("Duplicate Stripe event %s ignored", event.event_id)
            return False

        try:
            self.events.record(session, event.event_id, event.kind)

            if isinstance(event, CheckoutCompleted):
                self._checkout_completed(session, event)
            elif isinstance(event, SubscriptionChanged):
                self._subscription_changed(session, event)
            elif isinstance(event, SubscriptionDeleted):
                self._subscription_deleted(session, event)

            session.commit()
        except IntegrityError:
            # Another delivery of the same event committed first
            session.rollback()
            logger.info("Duplicate Stripe event %s ignored", event.event_id)
            return False
        except Exception:
            session.rollback()
            logger.exception("Failed to process Stripe event %s", event.event_id)
            return False

        return True

    # ----- Handlers (no commits) -----

    def _checkout_completed(self, session: Session, event: CheckoutCompleted) -> None:
        # Rental confirmation and the token reward are independent effects
        if event.rental_id:
            if self.rentals.confirm_payment(session, event.rental_id, event.payment_intent_id):
                logger.info("Rental %s paid and confirmed", event.rental_id)

        if event.user_id and settings.PAYMENT_REWARD_TOKENS > 0:
            if self.users.get_by_id(session, event.user_id) is None:
                logger.warning("Checkout reward skipped: unknown user %s", event.user_id)
            else:
                self.tokens.credit(
                    session,
                    event.user_id,
                    settings.PAYMENT_REWARD_TOKENS,
                    "earn",
                    "Payment reward",
                    related_id=event.rental_id,
                    commit=False,
                )

    def _subscription_changed(self, session: Session, event: SubscriptionChanged) -> None:
        user = self._subscriber(session, event.user_id, event.subscription_id)
        if user is None:
            logger.warning("Subscription %s has no matching user", event.subscription_id)
            return

        user.subscription_id = event.subscription_id
        user.subscription_tier = event.tier
        user.subscription_status = "active" if event.active else "past_due"
        if event.customer_id:
            user.stripe_customer_id = event.customer_id
        user.updated_at = datetime.now(timezone.utc)
        session.add(user)
        logger.info(
            "User %s subscription %s: %s/%s",
            user.id,
            event.subscription_id,
            user.subscription_tier,
            user.subscription_status,
        )

    def _subscription_deleted(self, session: Session, event: SubscriptionDeleted) -> None:
        user = self._subscriber(session, event.user_id, event.subscription_id)
        if user is None:
            logger.warning("Deleted subscription %s has no matching user", event.subscription_id)
            return

        user.subscription_status = "canceled"
        user.subscription_tier = "free"
        user.updated_at = datetime.now(timezone.utc)
        session.add(user)
        logger.info("User %s subscription canceled", user.id)

    def _subscriber(
        self,
        session: Session,
        user_id: uuid.UUID | None,
        subscription_id: str | None,
    ) -> User | None:
        if user_id:
            user = self.users.get_by_id(session, user_id)
            if user:
                return user
        if subscription_id:
            return self.users.get_by_subscription_id(session, subscription_id)
        return None
