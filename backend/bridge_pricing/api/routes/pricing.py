"""Pricing API routes — thin wrappers over the pricing engine and quote service."""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from bridge_pricing.config import settings
from bridge_pricing.models.quote import QuoteRequest, RateQuote
from bridge_pricing.models.rate import RateRecord
from bridge_pricing.models.request import LoanRequest
from bridge_pricing.models.result import PricingResult
from bridge_pricing.pricing import price
from bridge_pricing.services.quote_service import quote_rate_card

router = APIRouter(tags=["pricing"])


class PriceRequest(BaseModel):
    """Request body for pricing one loan against one selected rate row."""
    request: LoanRequest
    rate: RateRecord


@router.post("/pricing/price", response_model=PricingResult)
def price_loan(body: PriceRequest):
    """Price a loan in gross-loan or specific-net mode.

    Requests with neither a gross nor a target net return 200 with ``error`` set.
    """
    try:
        return price(body.request, body.rate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/pricing/quotes", response_model=list[RateQuote])
def quote_rates(body: QuoteRequest):
    """Price every supplied rate row against the same borrower inputs."""
    try:
        return quote_rate_card(body.rates, body.inputs, default_base_rate_pct=settings.DEFAULT_BASE_RATE_PCT)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
