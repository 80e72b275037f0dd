"""Bridge & fusion pricing — rate resolution, forward pricing, caps and the inverse solver."""
from bridge_pricing.pricing.rates import ResolvedRate, ltv_bucket, resolve_rate
from bridge_pricing.pricing.pricer import price_at, price_gross
from bridge_pricing.pricing.caps import CapContext, CapOutcome, clamp, max_gross
from bridge_pricing.pricing.solver import SolveOutcome, solve_gross_for_net
from bridge_pricing.pricing.engine import price

__all__ = [
    "ResolvedRate",
    "ltv_bucket",
    "resolve_rate",
    "price_gross",
    "price_at",
    "CapContext",
    "CapOutcome",
    "clamp",
    "max_gross",
    "SolveOutcome",
    "solve_gross_for_net",
    "price",
]
