from enum import Enum
from typing import Optional

from pydantic import BaseModel

from bridge_pricing.models.rate import ProductKind


class NetTargetStatus(str, Enum):
    """Outcome of a specific-net-loan solve."""
    met = "met"                        # Priced net reaches the requested net
    capped_short = "capped_short"      # A structural cap stopped gross before the target
    unconverged = "unconverged"        # Step bound exhausted without reaching the target
    not_applicable = "not_applicable"  # Gross-loan mode, no target requested


class PricingResult(BaseModel):
    """Full economics of one priced bridge or fusion loan.

    Monetary amounts are in pounds, rates and ratios in percent.
    """
    model_config = {"frozen": True}

    product_kind: ProductKind
    error: Optional[str] = None

    # Loan size and LTV
    gross: float = 0.0
    net_loan: float = 0.0
    nbp: float = 0.0
    property_value: float = 0.0
    ltv_bucket: int = 75
    gross_ltv: float = 0.0
    net_ltv: float = 0.0
    combined_gross_ltv: float = 0.0
    nbp_ltv: float = 0.0
    is_second_charge: bool = False
    first_charge_value: float = 0.0

    # Rates
    full_annual_rate: float = 0.0
    full_rate_monthly: float = 0.0
    full_coupon_rate_monthly: float = 0.0
    margin_monthly: float = 0.0
    bbr_monthly: float = 0.0
    pay_rate: float = 0.0
    full_rate_text: str = "N/A"
    tier_name: Optional[str] = None

    # Fees
    arrangement_fee_pct: float = 0.0
    arrangement_fee: float = 0.0
    proc_fee_pct: float = 0.0
    proc_fee: float = 0.0
    broker_fee: float = 0.0
    broker_client_fee: float = 0.0
    admin_fee: float = 0.0
    title_insurance: Optional[float] = None
    commitment_fee: float = 0.0
    commitment_fee_pct: float = 0.0
    exit_fee_pct: float = 0.0
    exit_fee: float = 0.0
    erc_1_pct: float = 0.0
    erc_2_pct: float = 0.0
    erc_1: float = 0.0
    erc_2: float = 0.0

    # Interest
    term_months: int = 0
    rolled_months: int = 0
    serviced_months: int = 0
    deferred_rate_pct: float = 0.0
    rolled_interest: float = 0.0
    rolled_interest_coupon: float = 0.0
    rolled_interest_bbr: float = 0.0
    deferred_interest: float = 0.0
    serviced_interest: float = 0.0
    total_interest: float = 0.0
    full_interest_coupon: float = 0.0
    full_interest_bbr: float = 0.0
    monthly_payment: float = 0.0
    total_amount_repayable: float = 0.0

    # Cost and affordability
    aprc_annual: float = 0.0
    aprc_monthly: float = 0.0
    icr: Optional[float] = None
    rent_pm: float = 0.0
    top_slicing_pm: float = 0.0

    # Caps
    capped: bool = False
    max_second_charge_gross: Optional[float] = None
    bridge_primary_cap_applied: bool = False
    bridge_primary_cap_gross: Optional[float] = None
    fusion_cap_applied: bool = False
    fusion_cap_gross: Optional[float] = None

    # Specific-net solve
    requested_net_loan: Optional[float] = None
    net_target_met: bool = False
    net_target_status: NetTargetStatus = NetTargetStatus.not_applicable
    solver_refine_passes: int = 0
    solver_step_iterations: int = 0
    solver_bound_hit: bool = False
