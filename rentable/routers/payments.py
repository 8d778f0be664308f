# rentable/routers/payments.py
from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from rentable.core.auth import require_auth
from rentable.database import get_session
from rentable.models.user import User
from rentable.repositories.listing_repo import ListingRepository
from rentable.repositories.payment_event_repo import PaymentEventRepository
from rentable.repositories.rental_repo import RentalRepository
from rentable.repositories.token_repo import TokenRepository
from rentable.repositories.user_repo import UserRepository
from rentable.schemas.payment import CheckoutCreate, CheckoutRead, SubscriptionCheckoutCreate
from rentable.services.payment_service import PaymentService
from rentable.services.rental_service import RentalService
from rentable.services.token_service import TokenService
from rentable.services.webhook_service import WebhookService

router = APIRouter(prefix="/payments", tags=["Payments"])

rental_repo = RentalRepository()
listing_repo = ListingRepository()
rental_service = RentalService(rental_repo, listing_repo)

service = PaymentService(rental_repo, listing_repo, rental_service)
webhook_service = WebhookService(
    PaymentEventRepository(),
    UserRepository(),
    rental_service,
    TokenService(TokenRepository()),
)


@router.post("/checkout", response_model=CheckoutRead)
def create_checkout(
    payload: CheckoutCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create a Stripe Checkout Session for a pending rental (renter only).
    """
    url = service.create_rental_checkout(session, current_user, payload)
    return CheckoutRead(url=url)


@router.post("/subscription", response_model=CheckoutRead)
def create_subscription_checkout(
    payload: SubscriptionCheckoutCreate,
    current_user: User = Depends(require_auth),
):
    """
    Create a Stripe Checkout Session for a monthly plan.
    """
    url = service.create_subscription_checkout(current_user, payload)
    return CheckoutRead(url=url)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    session: Session = Depends(get_session),
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
):
    """
    Stripe webhook receiver.

    - 400 on bad signature or unparsable body.
    - 200 {"received": true} for everything else, including replays,
      unknown event types and processing failures (logged).
    """
    payload = await request.body()
    # DB work and signature checks are blocking
    await run_in_threadpool(webhook_service.handle, session, payload, stripe_signature)
    return {"received": True}
