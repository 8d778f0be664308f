# rentable/services/payment_service.py
import logging
from decimal import Decimal

import stripe
from sqlmodel import Session

from rentable.core import stripe_client
from rentable.core.config import get_settings
from rentable.core.errors import Conflict, ExternalServiceError, Forbidden, NotFound
from rentable.models.user import User
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.schemas.payment import CheckoutCreate, SubscriptionCheckoutCreate
from rentable.services.rental_service import RentalService

logger = logging.getLogger(__name__)
settings = get_settings()

# Monthly plan prices in cents
SUBSCRIPTION_PLANS: dict[str, tuple[int, str]] = {
    "starter": (999, "Rentable Starter"),
    "pro": (2999, "Rentable Pro"),
    "enterprise": (9999, "Rentable Enterprise"),
}


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).to_integral_value())


class PaymentService:
    """
    Outbound Stripe calls: hosted Checkout Sessions for rentals and plans.

    Inbound events are handled by WebhookService.
    """

    def __init__(
        self,
        rental_repo: RentalRepository,
        listing_repo: ListingRepository,
        rentals: RentalService,
    ):
        self.rental_repo = rental_repo
        self.listing_repo = listing_repo
        self.rentals = rentals

    def create_rental_checkout(self, session: Session, user: User, payload: CheckoutCreate) -> str:
        """
        Start payment for a pending rental. Only the renter can pay, and only
        once.

        Returns:
            The hosted checkout URL.
        """
        if not stripe_client.stripe_configured():
            raise ExternalServiceError("Stripe not configured")

        rental = self.rental_repo.get_by_id(session, payload.rental_id)
        if not rental:
            raise NotFound("Rental not found")
        if rental.renter_id != user.id:
            raise Forbidden("Only the renter can pay for this rental")
        if rental.status != "pending" or rental.payment_status != "pending":
            raise Conflict("Rental is not awaiting payment")

        listing = self.listing_repo.get_by_id(session, rental.listing_id)
        title = listing.title if listing else "Rental"

        checkout = self._create_session(
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": settings.STRIPE_CURRENCY,
                        "product_data": {
                            "name": title,
                            "description": (
                                f"Rental from {rental.start_date:%Y-%m-%d} "
                                f"to {rental.end_date:%Y-%m-%d}"
                            ),
                        },
                        "unit_amount": to_cents(rental.total_price),
                    },
                    "quantity": 1,
                }
            ],
            mode="payment",
            customer_email=user.email,
            client_reference_id=str(user.id),
            metadata={
                "rental_id": str(rental.id),
                "user_id": str(user.id),
            },
            success_url=f"{payload.origin}/rentals/{rental.id}?payment=success",
            cancel_url=f"{payload.origin}/rentals/{rental.id}?payment=canceled",
        )

        self.rentals.attach_checkout_session(session, rental, checkout.id)
        logger.info("Checkout session %s created for rental %s", checkout.id, rental.id)
        return checkout.url

    def create_subscription_checkout(
        self,
        user: User,
        payload: SubscriptionCheckoutCreate,
    ) -> str:
        if not stripe_client.stripe_configured():
            raise ExternalServiceError("Stripe not configured")

        amount, name = SUBSCRIPTION_PLANS[payload.tier]
        metadata = {"user_id": str(user.id), "tier": payload.tier}

        checkout = self._create_session(
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": settings.STRIPE_CURRENCY,
                        "product_data": {"name": name},
                        "unit_amount": amount,
                        "recurring": {"interval": "month"},
                    },
                    "quantity": 1,
                }
            ],
            mode="subscription",
            customer_email=user.email,
            client_reference_id=str(user.id),
            metadata=metadata,
            # Copied onto the Subscription so its lifecycle events carry it
            subscription_data={"metadata": metadata},
            success_url=f"{payload.origin}/profile?subscription=success",
            cancel_url=f"{payload.origin}/pricing?canceled=true",
        )
        return checkout.url

    @staticmethod
    def _create_session(**params) -> stripe.checkout.Session:
        try:
            return stripe_client.create_checkout_session(**params)
        except stripe.StripeError as e:
            logger.warning("Stripe checkout failed: %s", e)
            raise ExternalServiceError("Payment provider error")
