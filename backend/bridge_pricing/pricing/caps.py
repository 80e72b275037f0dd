"""Cap enforcer — clamps a gross loan to the structural exposure limits.

Second-charge loans are limited on combined exposure (first charge plus the new
loan) as a share of property value. First-charge bridges are limited by the
rate record's max LTV, defaulting to 75%; fusion only when the record sets one.
Clamping never raises: the reduced gross is reported alongside flags and the
thresholds that applied.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import LoanRequest


@dataclass(frozen=True)
class CapContext:
    """Everything the caps depend on, detached from the rest of the request."""
    product_kind: ProductKind
    property_value: float
    is_second_charge: bool = False
    first_charge_value: float = 0.0
    max_ltv_pct: float | None = None

    @classmethod
    def from_request(cls, request: LoanRequest, rate_record: RateRecord) -> "CapContext":
        return cls(
            product_kind=request.product_kind,
            property_value=request.property_value,
            is_second_charge=request.is_second_charge,
            first_charge_value=request.first_charge_value,
            max_ltv_pct=rate_record.max_ltv,
        )


@dataclass(frozen=True)
class CapOutcome:
    """Clamped gross plus which cap bound and at what threshold."""
    gross: float
    capped: bool = False
    max_second_charge_gross: float | None = None
    bridge_primary_cap_applied: bool = False
    bridge_primary_cap_gross: float | None = None
    fusion_cap_applied: bool = False
    fusion_cap_gross: float | None = None

    @property
    def any_applied(self) -> bool:
        return self.capped or self.bridge_primary_cap_applied or self.fusion_cap_applied

    @property
    def limit(self) -> float | None:
        """The threshold that governs this context, if any."""
        for threshold in (self.max_second_charge_gross, self.bridge_primary_cap_gross, self.fusion_cap_gross):
            if threshold is not None:
                return threshold
        return None

    def mark_applied(self) -> "CapOutcome":
        """Flag the governing cap as applied (used when the solver stopped on it)."""
        if self.max_second_charge_gross is not None:
            return replace(self, capped=True)
        if self.bridge_primary_cap_gross is not None:
            return replace(self, bridge_primary_cap_applied=True)
        if self.fusion_cap_gross is not None:
            return replace(self, fusion_cap_applied=True)
        return self

    def merge(self, later: "CapOutcome") -> "CapOutcome":
        """Combine a pre-check with a later pass: later gross, flags OR'd."""
        return replace(
            later,
            capped=self.capped or later.capped,
            bridge_primary_cap_applied=self.bridge_primary_cap_applied or later.bridge_primary_cap_applied,
            fusion_cap_applied=self.fusion_cap_applied or later.fusion_cap_applied,
        )


def clamp(gross: float, context: CapContext, policy: PricingPolicy = DEFAULT_POLICY) -> CapOutcome:
    """Clamp ``gross`` to the cap that applies to ``context``.

    Order: the second-charge cap when the loan is a second charge, otherwise
    the product LTV cap. Re-applying to an already-clamped gross is a no-op
    apart from reporting the same threshold.
    """
    gross = max(gross, 0.0)
    pv = context.property_value
    if pv <= 0:
        return CapOutcome(gross=gross)

    if context.is_second_charge:
        limit = max(0.0, pv * policy.second_charge_max_combined_ltv - context.first_charge_value)
        if gross > limit:
            return CapOutcome(gross=limit, capped=True, max_second_charge_gross=limit)
        return CapOutcome(gross=gross, max_second_charge_gross=limit)

    if context.product_kind in (ProductKind.bridge_var, ProductKind.bridge_fix):
        max_ltv = context.max_ltv_pct
        if max_ltv is None or max_ltv <= 0:
            max_ltv = policy.default_bridge_max_ltv_pct
        limit = pv * max_ltv / 100
        if gross > limit:
            return CapOutcome(gross=limit, bridge_primary_cap_applied=True, bridge_primary_cap_gross=limit)
        return CapOutcome(gross=gross, bridge_primary_cap_gross=limit)

    if context.product_kind == ProductKind.fusion and context.max_ltv_pct and context.max_ltv_pct > 0:
        limit = pv * context.max_ltv_pct / 100
        if gross > limit:
            return CapOutcome(gross=limit, fusion_cap_applied=True, fusion_cap_gross=limit)
        return CapOutcome(gross=gross, fusion_cap_gross=limit)

    return CapOutcome(gross=gross)


def max_gross(context: CapContext, policy: PricingPolicy = DEFAULT_POLICY) -> float | None:
    """Largest gross the caps allow, or None when no cap applies."""
    return clamp(0.0, context, policy).limit
