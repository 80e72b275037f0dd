"""Forward pricer — prices a concrete gross loan in a single deterministic pass.

Produces fees, rolled/deferred/serviced interest, net proceeds, LTVs, APRC and
ICR for one gross amount. No iteration and no currency rounding; the only
floor applied is the title-insurance minimum premium.
"""
from __future__ import annotations

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import LoanRequest
from bridge_pricing.models.result import PricingResult
from bridge_pricing.pricing.fees import broker_client_fee, title_insurance_cost
from bridge_pricing.pricing.rates import ResolvedRate, ltv_bucket, resolve_rate


def serviced_months_for(request: LoanRequest, policy: PricingPolicy = DEFAULT_POLICY) -> int:
    """Months of paid interest: fusion always services against its fixed base term."""
    base_term = (
        policy.fusion_base_term_months
        if request.product_kind == ProductKind.fusion
        else request.term_months
    )
    return max(base_term - request.effective_rolled_months, 0)


def price_gross(
    gross: float,
    rate: ResolvedRate,
    request: LoanRequest,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PricingResult:
    """Price ``gross`` with an already-resolved rate.

    Args:
        gross: Gross loan in pounds (already capped by the caller).
        rate: Rate components for the product at the loan's LTV bucket.
        request: Borrower inputs (fees, term, rolled months, income).
        policy: Policy constants.

    Returns:
        PricingResult without cap flags or solver diagnostics; the engine
        attaches those.
    """
    kind = request.product_kind
    pv = request.property_value
    term = request.term_months
    rolled = request.effective_rolled_months
    deferred_annual = request.deferred_rate_annual
    deferred_monthly = deferred_annual / 12

    # Fees
    arrangement_fee = gross * request.arrangement_fee_pct / 100
    proc_fee = gross * request.proc_fee_pct / 100
    client_fee = broker_client_fee(gross, request)
    title_insurance = title_insurance_cost(gross, policy)

    # Interest
    serviced_months = serviced_months_for(request, policy)
    deferred_interest = gross * deferred_monthly * term
    rolled_coupon = gross * (rate.coupon_monthly - deferred_monthly) * rolled
    rolled_bbr = gross * rate.bbr_monthly * rolled if rate.links_to_base_rate else 0.0
    rolled_interest = rolled_coupon + rolled_bbr
    serviced_annual = rate.full_annual_rate - deferred_annual
    serviced_interest = gross * (serviced_annual / 12) * serviced_months
    total_interest = deferred_interest + rolled_interest + serviced_interest

    full_interest_coupon = gross * (rate.coupon_monthly - deferred_monthly) * term
    full_interest_bbr = gross * rate.bbr_monthly * term if rate.links_to_base_rate else 0.0

    net_loan = max(
        0.0,
        gross - arrangement_fee - rolled_interest - deferred_interest - proc_fee
        - request.broker_fee_flat - client_fee - request.admin_fee - (title_insurance or 0.0),
    )
    monthly_payment = serviced_interest / serviced_months if serviced_months > 0 else 0.0

    # LTVs; second charges are bucketed on combined exposure
    first_charge = request.first_charge_value if request.is_second_charge else 0.0
    gross_ltv = gross / pv * 100 if pv > 0 else 0.0
    combined_ltv = (gross + first_charge) / pv * 100 if pv > 0 else 0.0
    net_ltv = net_loan / pv * 100 if pv > 0 else 0.0

    nbp = net_loan + max(gross * policy.nbp_min_fee_share, arrangement_fee)
    nbp_ltv = nbp / pv * 100 if pv > 0 else 0.0

    # APRC: ((total repayable / net) - 1) / years
    total_repayable = gross + total_interest
    aprc_annual = (total_repayable / net_loan - 1) / (term / 12) * 100 if net_loan > 0 else 0.0

    icr = None
    if kind == ProductKind.fusion:
        icr = _interest_coverage(
            request.rent_pm + request.top_slicing_pm,
            rate.full_annual_rate - deferred_annual,
            gross,
            rolled_interest,
            policy,
        )

    if kind == ProductKind.fusion:
        pay_rate = (rate.margin_annual - deferred_annual) * 100
        full_rate_text = f"{rate.margin_annual * 100:.2f}% + BBR"
    else:
        pay_rate = rate.coupon_monthly * 100
        suffix = " + BBR" if kind == ProductKind.bridge_var else ""
        full_rate_text = f"{rate.coupon_monthly * 100:.2f}%{suffix}"

    return PricingResult(
        product_kind=kind,
        gross=gross,
        net_loan=net_loan,
        nbp=nbp,
        property_value=pv,
        ltv_bucket=rate.ltv_bucket,
        gross_ltv=gross_ltv,
        net_ltv=net_ltv,
        combined_gross_ltv=combined_ltv if request.is_second_charge else gross_ltv,
        nbp_ltv=nbp_ltv,
        is_second_charge=request.is_second_charge,
        first_charge_value=first_charge,
        full_annual_rate=rate.full_annual_rate * 100,
        full_rate_monthly=rate.full_annual_rate / 12 * 100,
        full_coupon_rate_monthly=rate.coupon_monthly * 100,
        margin_monthly=rate.margin_monthly * 100,
        bbr_monthly=rate.bbr_monthly * 100,
        pay_rate=pay_rate,
        full_rate_text=full_rate_text,
        tier_name=rate.tier_name,
        arrangement_fee_pct=request.arrangement_fee_pct,
        arrangement_fee=arrangement_fee,
        proc_fee_pct=request.proc_fee_pct,
        proc_fee=proc_fee,
        broker_fee=request.broker_fee_flat,
        broker_client_fee=client_fee,
        admin_fee=request.admin_fee,
        title_insurance=title_insurance,
        commitment_fee=request.commitment_fee,
        commitment_fee_pct=request.commitment_fee / gross * 100 if gross > 0 else 0.0,
        exit_fee_pct=request.exit_fee_pct,
        exit_fee=gross * request.exit_fee_pct / 100,
        erc_1_pct=rate.erc_1_pct,
        erc_2_pct=rate.erc_2_pct,
        erc_1=gross * rate.erc_1_pct / 100,
        erc_2=gross * rate.erc_2_pct / 100,
        term_months=term,
        rolled_months=rolled,
        serviced_months=serviced_months,
        deferred_rate_pct=deferred_annual * 100,
        rolled_interest=rolled_interest,
        rolled_interest_coupon=rolled_coupon,
        rolled_interest_bbr=rolled_bbr,
        deferred_interest=deferred_interest,
        serviced_interest=serviced_interest,
        total_interest=total_interest,
        full_interest_coupon=full_interest_coupon,
        full_interest_bbr=full_interest_bbr,
        monthly_payment=monthly_payment,
        total_amount_repayable=total_repayable,
        aprc_annual=aprc_annual,
        aprc_monthly=aprc_annual / 12,
        icr=icr,
        rent_pm=request.rent_pm,
        top_slicing_pm=request.top_slicing_pm,
    )


def _interest_coverage(
    monthly_income: float,
    serviced_annual_rate: float,
    gross: float,
    rolled_interest: float,
    policy: PricingPolicy,
) -> float | None:
    """ICR% = horizon income / (horizon interest net of deferred, less rolled).

    None when there is no income or the interest cost is not positive.
    """
    if monthly_income <= 0:
        return None
    years = policy.icr_horizon_months / 12
    interest_cost = serviced_annual_rate * gross * years - rolled_interest
    if interest_cost <= 0:
        return None
    return monthly_income * policy.icr_horizon_months / interest_cost * 100


def price_at(
    gross: float,
    request: LoanRequest,
    rate_record: RateRecord,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PricingResult:
    """Resolve the rate for the bucket ``gross`` falls in, then price it."""
    exposure = gross + (request.first_charge_value if request.is_second_charge else 0.0)
    bucket = ltv_bucket(exposure, request.property_value, policy)
    rate = resolve_rate(request.product_kind, bucket, rate_record, request.base_rate_annual)
    return price_gross(gross, rate, request, policy)
