# rentable/schemas/payment.py
"""
Payment schemas: checkout payloads and typed webhook events.

Stripe delivers loosely-shaped JSON. Before any state is touched, the raw
event is parsed into one of the variants below; anything we do not handle
becomes UnknownEvent.

    checkout.session.completed        -> CheckoutCompleted
    customer.subscription.created     -> SubscriptionChanged
    customer.subscription.updated     -> SubscriptionChanged
    customer.subscription.deleted     -> SubscriptionDeleted
    anything else                     -> UnknownEvent
"""

import logging
import uuid
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)

PaidTier = Literal["starter", "pro", "enterprise"]
PAID_TIERS = ("starter", "pro", "enterprise")
DEFAULT_TIER = "starter"


# ----- Checkout payloads -----


class CheckoutCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    rental_id: uuid.UUID
    origin: str


class SubscriptionCheckoutCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    tier: PaidTier
    origin: str


class CheckoutRead(SQLModel):
    url: str


# ----- Webhook events -----


class CheckoutCompleted(BaseModel):
    kind: Literal["checkout_completed"] = "checkout_completed"
    event_id: str
    rental_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    payment_intent_id: str | None = None


class SubscriptionChanged(BaseModel):
    kind: Literal["subscription_changed"] = "subscription_changed"
    event_id: str
    subscription_id: str
    user_id: uuid.UUID | None = None
    customer_id: str | None = None
    tier: PaidTier = DEFAULT_TIER
    active: bool = False


class SubscriptionDeleted(BaseModel):
    kind: Literal["subscription_deleted"] = "subscription_deleted"
    event_id: str
    subscription_id: str | None = None
    user_id: uuid.UUID | None = None


class UnknownEvent(BaseModel):
    kind: Literal["unknown"] = "unknown"
    event_id: str
    type: str


PaymentEventPayload = Union[
    CheckoutCompleted, SubscriptionChanged, SubscriptionDeleted, UnknownEvent
]


def _metadata_uuid(metadata: dict[str, Any], key: str) -> uuid.UUID | None:
    raw = metadata.get(key)
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        logger.warning("Ignoring malformed %s in event metadata: %r", key, raw)
        return None


def parse_event(raw: Any) -> PaymentEventPayload:
    """
    Parse a decoded Stripe event into a typed payload.

    Raises:
        ValueError: if the envelope (id / type / data.object) is malformed.
    """
    if not isinstance(raw, dict):
        raise ValueError("Event payload must be a JSON object")

    event_id = raw.get("id")
    event_type = raw.get("type")
    if not isinstance(event_id, str) or not event_id:
        raise ValueError("Event is missing an id")
    if not isinstance(event_type, str) or not event_type:
        raise ValueError("Event is missing a type")

    data = raw.get("data") or {}
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        obj = {}
    metadata = obj.get("metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}

    if event_type == "checkout.session.completed":
        payment_intent = obj.get("payment_intent")
        return CheckoutCompleted(
            event_id=event_id,
            rental_id=_metadata_uuid(metadata, "rental_id"),
            user_id=_metadata_uuid(metadata, "user_id"),
            payment_intent_id=payment_intent if isinstance(payment_intent, str) else None,
        )

    if event_type in ("customer.subscription.created", "customer.subscription.updated"):
        subscription_id = obj.get("id")
        if not isinstance(subscription_id, str):
            raise ValueError("Subscription event is missing the subscription id")
        tier = metadata.get("tier")
        customer = obj.get("customer")
        return SubscriptionChanged(
            event_id=event_id,
            subscription_id=subscription_id,
            user_id=_metadata_uuid(metadata, "user_id"),
            customer_id=customer if isinstance(customer, str) else None,
            tier=tier if tier in PAID_TIERS else DEFAULT_TIER,
            active=obj.get("status") == "active",
        )

    if event_type == "customer.subscription.deleted":
        subscription_id = obj.get("id")
        return SubscriptionDeleted(
            event_id=event_id,
            subscription_id=subscription_id if isinstance(subscription_id, str) else None,
            user_id=_metadata_uuid(metadata, "user_id"),
        )

    return UnknownEvent(event_id=event_id, type=event_type)
