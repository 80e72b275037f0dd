"""Rate resolver — turns a rate record into the rate components used in pricing.

Rates on the card are quoted differently per product: variable bridges carry a
monthly margin over base rate, fixed bridges a monthly coupon, and fusion an
annual margin over base rate. All resolved components are decimals.
"""
from __future__ import annotations

from dataclasses import dataclass

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import ProductKind, RateRecord


@dataclass(frozen=True)
class ResolvedRate:
    """Rate components for one product at one LTV bucket."""
    product_kind: ProductKind
    ltv_bucket: int
    coupon_monthly: float
    margin_monthly: float
    margin_annual: float
    bbr_monthly: float
    full_annual_rate: float
    tier_name: str | None = None
    erc_1_pct: float = 0.0
    erc_2_pct: float = 0.0

    @property
    def links_to_base_rate(self) -> bool:
        return self.product_kind in (ProductKind.bridge_var, ProductKind.fusion)


def ltv_bucket(exposure: float, property_value: float, policy: PricingPolicy = DEFAULT_POLICY) -> int:
    """Return the rate bucket (60, 70 or 75) for an exposure against a property.

    Buckets are ceilings: 60.0% lands in 60, 60.01% in 70. An unknown property
    value prices at the top bucket.
    """
    low, mid, top = policy.ltv_bucket_bounds
    if property_value <= 0:
        return top
    ltv_pct = exposure / property_value * 100
    if ltv_pct <= low:
        return low
    if ltv_pct <= mid:
        return mid
    return top


def resolve_rate(
    kind: ProductKind,
    bucket: int,
    rate_record: RateRecord,
    base_rate_annual: float,
) -> ResolvedRate:
    """Resolve coupon, margin and base-rate components for a product kind.

    ``base_rate_annual`` is a decimal (0.04 for 4%). Raises ValueError for a
    product kind the resolver does not know how to price.
    """
    quoted = (rate_record.rate or 0.0) / 100
    bbr_monthly = base_rate_annual / 12

    if kind == ProductKind.bridge_var:
        return ResolvedRate(
            product_kind=kind,
            ltv_bucket=bucket,
            coupon_monthly=quoted,
            margin_monthly=quoted,
            margin_annual=quoted * 12,
            bbr_monthly=bbr_monthly,
            full_annual_rate=(quoted + bbr_monthly) * 12,
        )

    if kind == ProductKind.bridge_fix:
        return ResolvedRate(
            product_kind=kind,
            ltv_bucket=bucket,
            coupon_monthly=quoted,
            margin_monthly=quoted,
            margin_annual=quoted * 12,
            bbr_monthly=0.0,
            full_annual_rate=quoted * 12,
        )

    if kind == ProductKind.fusion:
        return ResolvedRate(
            product_kind=kind,
            ltv_bucket=bucket,
            coupon_monthly=quoted / 12,
            margin_monthly=quoted / 12,
            margin_annual=quoted,
            bbr_monthly=bbr_monthly,
            full_annual_rate=quoted + base_rate_annual,
            tier_name=rate_record.product or "Standard",
            erc_1_pct=rate_record.erc_1 or 0.0,
            erc_2_pct=rate_record.erc_2 or 0.0,
        )

    raise ValueError(f"Invalid product kind: {kind!r}")
