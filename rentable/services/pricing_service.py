# rentable/services/pricing_service.py
"""
Advisory pricing backed by a language model.

The model is treated as an oracle that may be down, slow or wrong: callers
always get an answer, falling back to static defaults when it fails.
"""

import json
import logging
from typing import Any

import openai
from openai import OpenAI

from rentable.core.config import get_settings
from rentable.schemas.pricing import (
    FALLBACK_ESTIMATE,
    FALLBACK_WEIRD_PICK,
    ItemDescriptor,
    PriceEstimate,
    WeirdVaultPick,
)

logger = logging.getLogger(__name__)
settings = get_settings()

FAIR_PRICE_PROMPT = (
    "You are Rentable's AI Fair Pricing Engine. Analyze rental items and suggest "
    "fair daily rental prices in USD.\n"
    "Return a JSON object with: suggested_price (number), min_price (number), "
    'max_price (number), confidence ("high" | "medium" | "low"), '
    "reasoning (string), co2_saved_kg (number).\n"
    "Base prices on item category, condition, typical retail value, local demand "
    "and sharing economy standards. co2_saved_kg is the estimated kg of CO2 "
    "avoided by renting instead of buying new."
)

WEIRD_VAULT_PROMPT = (
    "You are the Weird Vault curator for Rentable. Generate one delightfully "
    "bizarre rental item. Return a JSON object with: title, description, "
    "price_per_day (number), emoji, weirdness_score (number 1-10), fun_fact."
)


class PriceOracleUnavailable(Exception):
    """The oracle could not produce a usable answer."""


class PriceOracle:
    """Interface for fair-price estimation."""

    def estimate(self, item: ItemDescriptor) -> PriceEstimate:
        raise NotImplementedError

    def weird_pick(self) -> WeirdVaultPick:
        raise NotImplementedError


class OpenAIPriceOracle(PriceOracle):
    """
    Chat-completions oracle asking for a JSON object.
    Every call is bounded by LLM_TIMEOUT_SECONDS and is not retried.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        self._api_key = (api_key or "").strip() or None
        self._model = model or settings.OPENAI_MODEL
        self._timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if not self._api_key:
            raise PriceOracleUnavailable("OPENAI_API_KEY is not configured")
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        return self._client

    def _complete_json(self, system: str, user: str) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content if response.choices else None
            data = json.loads(content or "")
        except (openai.OpenAIError, ValueError) as e:
            raise PriceOracleUnavailable(str(e)) from e

        if not isinstance(data, dict):
            raise PriceOracleUnavailable("Model did not return a JSON object")
        return data

    def estimate(self, item: ItemDescriptor) -> PriceEstimate:
        parts = [
            f'Item: "{item.title}"',
            f"Category: {item.category}",
            f"Condition: {item.condition}",
            f"Location: {item.location}",
        ]
        if item.description:
            parts.append(f"Description: {item.description}")

        data = self._complete_json(FAIR_PRICE_PROMPT, " | ".join(parts))
        try:
            return PriceEstimate.model_validate(data)
        except ValueError as e:
            raise PriceOracleUnavailable(f"Unexpected estimate shape: {e}") from e

    def weird_pick(self) -> WeirdVaultPick:
        data = self._complete_json(
            WEIRD_VAULT_PROMPT,
            "Give me today's Weird Vault featured item: something genuinely "
            "unusual that someone might actually rent.",
        )
        try:
            return WeirdVaultPick.model_validate(data)
        except ValueError as e:
            raise PriceOracleUnavailable(f"Unexpected pick shape: {e}") from e


class PricingService:
    def __init__(self, oracle: PriceOracle):
        self.oracle = oracle

    def fair_price(self, item: ItemDescriptor) -> PriceEstimate:
        """Never raises; returns FALLBACK_ESTIMATE when the oracle fails."""
        try:
            return self.oracle.estimate(item)
        except PriceOracleUnavailable as e:
            logger.warning("Fair price oracle unavailable, using default: %s", e)
            return FALLBACK_ESTIMATE.model_copy()

    def weird_vault_pick(self) -> WeirdVaultPick:
        try:
            return self.oracle.weird_pick()
        except PriceOracleUnavailable as e:
            logger.warning("Weird vault oracle unavailable, using default: %s", e)
            return FALLBACK_WEIRD_PICK.model_copy()
