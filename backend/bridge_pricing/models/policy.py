from pydantic import BaseModel


class PricingPolicy(BaseModel):
    """Lending policy constants used by the pricer, cap enforcer and solver.

    Kept out of the calculation code so a policy change is a data change.
    Percent-of-value limits are fractions (0.70 = 70%) unless named ``_pct``.
    """
    model_config = {"frozen": True}

    # Product structure
    fusion_base_term_months: int = 24
    default_bridge_max_ltv_pct: float = 75.0
    second_charge_max_combined_ltv: float = 0.70
    ltv_bucket_bounds: tuple[int, int, int] = (60, 70, 75)

    # Title insurance: 0.13% of gross plus 12% IPT, floor £392, not offered above £3m
    title_insurance_rate: float = 0.0013
    title_insurance_ipt: float = 0.12
    title_insurance_floor: float = 392.0
    title_insurance_max_gross: float = 3_000_000.0

    # Net proceeds to borrower adds back the larger of this share of gross or the arrangement fee
    nbp_min_fee_share: float = 0.02

    # ICR compares this many months of income against the same period's interest
    icr_horizon_months: int = 24

    # Inverse solver
    solver_step: float = 1000.0
    solver_seed_factor: float = 1.15
    solver_refine_passes: int = 10
    solver_max_steps: int = 200
    solver_convergence_tolerance: float = 1.0
    solver_target_tolerance: float = 0.5
    solver_overshoot_tolerance: float = 500.0


DEFAULT_POLICY = PricingPolicy()
