# rentable/core/stripe_client.py
"""
Stripe helpers.

The secret key is read from Settings on first use, so the app starts (and
tests run) without Stripe configured. Calls use the library's default
network timeout.
"""

import json
from typing import Any

import stripe

from rentable.core.config import get_settings

settings = get_settings()


def stripe_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY)


def _configure() -> None:
    if not settings.STRIPE_SECRET_KEY:
        raise RuntimeError("Missing STRIPE_SECRET_KEY in .env")
    stripe.api_key = settings.STRIPE_SECRET_KEY


def create_checkout_session(**params: Any) -> stripe.checkout.Session:
    """
    Thin wrapper over stripe.checkout.Session.create.

    Raises:
        RuntimeError: Stripe is not configured.
        stripe.StripeError: the API call failed.
    """
    _configure()
    return stripe.checkout.Session.create(**params)


def read_webhook_event(payload: bytes, signature: str | None) -> Any:
    """
    Verify (when a webhook secret is configured) and decode a webhook body.

    Without STRIPE_WEBHOOK_SECRET the body is trusted as-is. That mode is
    for local development only.

    Raises:
        stripe.SignatureVerificationError: bad or missing signature.
        ValueError: body is not valid JSON.
    """
    text = payload.decode("utf-8")
    if settings.STRIPE_WEBHOOK_SECRET:
        stripe.WebhookSignature.verify_header(
            text,
            signature or "",
            settings.STRIPE_WEBHOOK_SECRET,
            stripe.Webhook.DEFAULT_TOLERANCE,
        )
    return json.loads(text)
