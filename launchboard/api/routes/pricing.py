"""Pricing plans catalogue (static)."""
from fastapi import APIRouter

from launchboard.data.pricing_plans import PRICING_PLANS

router = APIRouter()


@router.get("")
def list_pricing_plans() -> dict[str, list]:
    return {"plans": PRICING_PLANS}
