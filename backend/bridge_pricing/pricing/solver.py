"""Inverse solver — finds the gross loan that delivers a requested net loan.

Net depends on gross through percentage fees, rolled and deferred interest, the
title-insurance floor and the LTV rate bucket, so there is no closed form.
The solve runs in three bounded phases:

1. Refine: damped fixed-point passes from a seed of target x 1.15, adding the
   net shortfall to the estimate until priced net is within £1 of the target,
   then rounding gross up to the next £1,000.
2. Step up: if net is still short, add £1,000 at a time until it meets the
   target, stopping at the structural cap.
3. Step down: if net overshoots by more than £500, remove £1,000 at a time
   while the lower gross still meets the target.

Gross never finishes below what is needed to meet the target unless a cap binds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import RateRecord
from bridge_pricing.models.request import LoanRequest
from bridge_pricing.models.result import NetTargetStatus
from bridge_pricing.pricing.fees import round_up_to
from bridge_pricing.pricing.pricer import price_at

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveOutcome:
    """Gross chosen by the solver and how it got there."""
    gross: float
    net: float
    status: NetTargetStatus
    capped: bool = False
    refine_passes: int = 0
    step_iterations: int = 0
    bound_hit: bool = False


def seed_gross(target_net: float, policy: PricingPolicy = DEFAULT_POLICY) -> float:
    """Initial estimate: target plus typical fees, rounded up to the solver step."""
    return round_up_to(target_net * policy.solver_seed_factor, policy.solver_step)


def solve_gross_for_net(
    target_net: float,
    request: LoanRequest,
    rate_record: RateRecord,
    policy: PricingPolicy = DEFAULT_POLICY,
    cap: float | None = None,
) -> SolveOutcome:
    """Return the smallest stepped gross whose priced net meets ``target_net``.

    Args:
        target_net: Net loan the borrower wants, in pounds (> 0).
        request: Pricing inputs; its gross_loan is ignored.
        rate_record: Selected rate card row.
        policy: Policy constants (step size, tolerances, iteration bounds).
        cap: Largest gross the structural caps allow, or None.

    Returns:
        SolveOutcome with status met, capped_short or unconverged.
    """
    step = policy.solver_step
    floor = target_net - policy.solver_target_tolerance

    def net_for(gross: float) -> float:
        return price_at(gross, request, rate_record, policy).net_loan

    # Phase 1: damped fixed-point refinement
    estimate = seed_gross(target_net, policy)
    passes = 0
    for passes in range(1, policy.solver_refine_passes + 1):
        candidate = net_for(estimate)
        shortfall = target_net - candidate
        logger.debug("Refine pass %d: gross=%.2f net=%.2f shortfall=%.2f",
                     passes, estimate, candidate, shortfall)
        if abs(shortfall) < policy.solver_convergence_tolerance:
            break
        estimate += shortfall
    gross = round_up_to(estimate, step)

    capped = False
    if cap is not None and gross > cap:
        gross = cap
        capped = True

    current = net_for(gross)
    iterations = 0
    bound_hit = False

    if current >= floor:
        # Phase 3: pull back an over-quote
        if current > target_net + policy.solver_overshoot_tolerance:
            while current > target_net + policy.solver_overshoot_tolerance and gross > step:
                lower = gross - step
                lower_net = net_for(lower)
                if lower_net < floor:
                    break
                gross, current = lower, lower_net
                iterations += 1
                if iterations >= policy.solver_max_steps:
                    bound_hit = True
                    break
    elif gross > 0:
        # Phase 2: step up towards the target
        while current < floor:
            if cap is not None and gross + step > cap:
                gross = cap
                capped = True
                current = net_for(gross)
                break
            gross += step
            current = net_for(gross)
            iterations += 1
            if iterations >= policy.solver_max_steps:
                bound_hit = current < floor
                break

    if bound_hit:
        logger.warning(
            "Solver step bound (%d) reached for target net %.2f: gross=%.2f net=%.2f",
            policy.solver_max_steps, target_net, gross, current,
        )

    if current >= floor:
        status = NetTargetStatus.met
    elif capped:
        status = NetTargetStatus.capped_short
    else:
        status = NetTargetStatus.unconverged

    return SolveOutcome(
        gross=gross,
        net=current,
        status=status,
        capped=capped,
        refine_passes=passes,
        step_iterations=iterations,
        bound_hit=bound_hit,
    )
