"""Public pricing entry point.

Composes the cap enforcer, inverse solver and forward pricer:

    cap pre-check -> (inverse solve | single forward price) -> cap final pass

Every call is a pure function of its inputs.
"""
from __future__ import annotations

import logging

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import RateRecord
from bridge_pricing.models.request import LoanRequest
from bridge_pricing.models.result import NetTargetStatus, PricingResult
from bridge_pricing.pricing.caps import CapContext, CapOutcome, clamp, max_gross
from bridge_pricing.pricing.pricer import price_at
from bridge_pricing.pricing.solver import SolveOutcome, solve_gross_for_net

logger = logging.getLogger(__name__)

NO_LOAN_ERROR = "No valid gross loan or specific net loan provided"


def price(
    request: LoanRequest,
    rate_record: RateRecord,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PricingResult:
    """Price a bridge or fusion loan against one rate record.

    Gross-loan mode prices ``request.gross_loan`` after capping. Specific-net
    mode (``use_specific_net`` with a positive ``specific_net_loan``) solves for
    the gross first. A request with neither returns a zeroed result carrying
    ``error`` instead of raising.
    """
    context = CapContext.from_request(request, rate_record)
    target = request.target_net

    solve: SolveOutcome | None = None
    if target is not None:
        solve = solve_gross_for_net(target, request, rate_record, policy, cap=max_gross(context, policy))
        caps = clamp(solve.gross, context, policy)
        if solve.capped:
            caps = caps.mark_applied()
    elif request.gross_loan is not None and request.gross_loan > 0:
        caps = clamp(request.gross_loan, context, policy)
    else:
        logger.info("Nothing to price for %s: %s", request.product_kind.value, NO_LOAN_ERROR)
        return empty_result(request, NO_LOAN_ERROR)

    result = price_at(caps.gross, request, rate_record, policy)

    final = clamp(result.gross, context, policy)
    if final.gross != result.gross:
        result = price_at(final.gross, request, rate_record, policy)
    caps = caps.merge(final)

    return result.model_copy(update=_cap_fields(caps) | _solve_fields(solve, target))


def empty_result(request: LoanRequest, error: str) -> PricingResult:
    """Zeroed result for a request that has nothing to price."""
    return PricingResult(
        product_kind=request.product_kind,
        error=error,
        property_value=request.property_value,
        term_months=request.term_months,
        serviced_months=request.term_months,
        rent_pm=request.rent_pm,
        top_slicing_pm=request.top_slicing_pm,
    )


def _cap_fields(caps: CapOutcome) -> dict:
    return {
        "capped": caps.capped,
        "max_second_charge_gross": caps.max_second_charge_gross,
        "bridge_primary_cap_applied": caps.bridge_primary_cap_applied,
        "bridge_primary_cap_gross": caps.bridge_primary_cap_gross,
        "fusion_cap_applied": caps.fusion_cap_applied,
        "fusion_cap_gross": caps.fusion_cap_gross,
    }


def _solve_fields(solve: SolveOutcome | None, target: float | None) -> dict:
    if solve is None:
        return {"net_target_status": NetTargetStatus.not_applicable}
    return {
        "requested_net_loan": target,
        "net_target_met": solve.status == NetTargetStatus.met,
        "net_target_status": solve.status,
        "solver_refine_passes": solve.refine_passes,
        "solver_step_iterations": solve.step_iterations,
        "solver_bound_hit": solve.bound_hit,
    }
