# rentable/schemas/pricing.py
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

Confidence = Literal["high", "medium", "low"]


class ItemDescriptor(SQLModel):
    """What the oracle is told about an item."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=255)
    category: str = Field(max_length=50)
    condition: str = Field(max_length=50)
    location: str = Field(max_length=255)
    description: str | None = None


class PriceEstimate(SQLModel):
    suggested_price: float = Field(ge=0)
    min_price: float = Field(ge=0)
    max_price: float = Field(ge=0)
    confidence: Confidence
    reasoning: str
    co2_saved_kg: float = Field(ge=0)


class WeirdVaultPick(SQLModel):
    title: str
    description: str
    price_per_day: float = Field(ge=0)
    emoji: str
    weirdness_score: float
    fun_fact: str


# Advisory defaults used whenever the oracle is unavailable.
FALLBACK_ESTIMATE = PriceEstimate(
    suggested_price=25,
    min_price=15,
    max_price=45,
    confidence="low",
    reasoning="Default estimate",
    co2_saved_kg=2.5,
)

FALLBACK_WEIRD_PICK = WeirdVaultPick(
    title="Emotional Support Goat",
    description="Certified therapy goat for your next presentation",
    price_per_day=45,
    emoji="\U0001F410",
    weirdness_score=9,
    fun_fact="Goats have rectangular pupils",
)
