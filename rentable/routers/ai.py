# rentable/routers/ai.py
from fastapi import APIRouter

from rentable.core.config import get_settings
from rentable.schemas.pricing import ItemDescriptor, PriceEstimate, WeirdVaultPick
from rentable.services.pricing_service import OpenAIPriceOracle, PricingService

router = APIRouter(prefix="/ai", tags=["AI"])

settings = get_settings()
service = PricingService(OpenAIPriceOracle(api_key=settings.OPENAI_API_KEY))


@router.post("/fair-price", response_model=PriceEstimate)
def get_fair_price(payload: ItemDescriptor):
    """
    Suggest a daily rental price. Advisory only; always answers, falling
    back to a default estimate when the model is unavailable.
    """
    return service.fair_price(payload)


@router.get("/weird-vault", response_model=WeirdVaultPick)
def get_weird_vault_pick():
    """Today's featured oddity."""
    return service.weird_vault_pick()
