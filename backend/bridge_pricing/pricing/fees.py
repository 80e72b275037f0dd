"""Fee helpers shared by the forward pricer and the inverse solver."""
from __future__ import annotations

import math

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.request import BrokerFeeMode, LoanRequest


def round_up_to(value: float, step: float) -> float:
    """Round a positive amount up to the next multiple of ``step``; non-positive -> 0."""
    if value <= 0:
        return 0.0
    return math.ceil(value / step) * step


def title_insurance_cost(gross: float, policy: PricingPolicy = DEFAULT_POLICY) -> float | None:
    """Title insurance premium including IPT, or None when the loan is outside cover."""
    if gross <= 0 or gross > policy.title_insurance_max_gross:
        return None
    with_ipt = gross * policy.title_insurance_rate * (1.0 + policy.title_insurance_ipt)
    return max(policy.title_insurance_floor, with_ipt)


def broker_client_fee(gross: float, request: LoanRequest) -> float:
    """Broker client fee in pounds: flat, or a percentage of gross."""
    if request.broker_client_fee_mode == BrokerFeeMode.percent:
        return gross * request.broker_client_fee / 100 if gross > 0 else 0.0
    return request.broker_client_fee
