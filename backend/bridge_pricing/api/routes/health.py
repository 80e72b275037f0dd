from fastapi import APIRouter

from bridge_pricing.config import settings
from bridge_pricing.models.policy import DEFAULT_POLICY

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "default_base_rate_pct": settings.DEFAULT_BASE_RATE_PCT,
        "policy": DEFAULT_POLICY.model_dump(),
    }
