"""Rate-card quoting service.

Turns one enquiry's inputs plus a rate card row into a LoanRequest (product
kind from the row's set key, rolled months and deferred rate clamped to the
row's limits, broker commission and client fee from broker settings), prices
it, and reports the rate and product fee actually applied after overrides.
"""
from __future__ import annotations

import logging

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.quote import BrokerSettings, ClientType, QuoteInputs, RateQuote
from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import BrokerFeeMode, LoanRequest
from bridge_pricing.pricing.engine import price

logger = logging.getLogger(__name__)

DEFAULT_BASE_RATE_PCT = 4.0
_DEFAULT_PRODUCT_FEE_PCT = 2.0
_DEFAULT_BROKER_COMMISSION_PCT = 0.9

# (default term, min rolled, max rolled) when the rate row leaves them blank
_FUSION_DEFAULTS = (24, 6, 12)
_BRIDGE_DEFAULTS = (12, 3, 18)


def product_kind_for(rate_record: RateRecord) -> ProductKind:
    """Derive the product kind from the rate row's set key (fixed when unclear)."""
    set_key = (rate_record.set_key or "").lower()
    if set_key == "fusion":
        return ProductKind.fusion
    if "var" in set_key:
        return ProductKind.bridge_var
    return ProductKind.bridge_fix


def build_request(
    rate_record: RateRecord,
    inputs: QuoteInputs,
    default_base_rate_pct: float = DEFAULT_BASE_RATE_PCT,
) -> LoanRequest:
    """Build the LoanRequest a rate row implies for these inputs."""
    kind = product_kind_for(rate_record)
    default_term, default_min_rolled, default_max_rolled = (
        _FUSION_DEFAULTS if kind == ProductKind.fusion else _BRIDGE_DEFAULTS
    )
    term = inputs.term_months or rate_record.max_term or default_term

    min_rolled = rate_record.min_rolled_months or default_min_rolled
    max_rolled = rate_record.max_rolled_months or default_max_rolled
    if kind != ProductKind.fusion:
        max_rolled = min(max_rolled, term)
    if inputs.rolled_months_override is not None:
        rolled = min(max(inputs.rolled_months_override, min_rolled), max_rolled)
    else:
        rolled = min_rolled

    deferred = 0.0
    if kind == ProductKind.fusion and inputs.deferred_rate_override is not None:
        deferred = max(0.0, min(inputs.deferred_rate_override, rate_record.max_defer_int or 0.0))

    fee_mode, client_fee = _broker_client_fee(inputs.broker_settings, inputs.broker_client_fee)
    charge_type = (inputs.charge_type or rate_record.charge_type or "").lower()

    return LoanRequest(
        product_kind=kind,
        property_value=inputs.property_value,
        gross_loan=inputs.gross_loan,
        use_specific_net=inputs.use_specific_net,
        specific_net_loan=inputs.specific_net_loan,
        term_months=term,
        rolled_months=rolled,
        deferred_rate_pct=deferred,
        base_rate_pct=inputs.base_rate_pct if inputs.base_rate_pct is not None else default_base_rate_pct,
        arrangement_fee_pct=rate_record.product_fee if rate_record.product_fee is not None else _DEFAULT_PRODUCT_FEE_PCT,
        proc_fee_pct=_proc_fee_pct(inputs.broker_settings, inputs.proc_fee_pct),
        broker_fee_flat=inputs.broker_fee_flat,
        broker_client_fee=client_fee,
        broker_client_fee_mode=fee_mode,
        admin_fee=rate_record.admin_fee,
        is_second_charge="second" in charge_type,
        first_charge_value=inputs.first_charge_value,
        rent_pm=inputs.monthly_rent,
        top_slicing_pm=inputs.top_slicing,
        commitment_fee=inputs.commitment_fee,
        exit_fee_pct=inputs.exit_fee_pct,
    )


def quote_for_rate(
    rate_record: RateRecord,
    inputs: QuoteInputs,
    policy: PricingPolicy = DEFAULT_POLICY,
    default_base_rate_pct: float = DEFAULT_BASE_RATE_PCT,
) -> RateQuote:
    """Price one rate row, applying any rate or product-fee override first."""
    applied_rate = inputs.overridden_rate if inputs.overridden_rate is not None else rate_record.rate
    if inputs.product_fee_override_pct is not None:
        applied_fee = inputs.product_fee_override_pct
    elif rate_record.product_fee is not None:
        applied_fee = rate_record.product_fee
    else:
        applied_fee = _DEFAULT_PRODUCT_FEE_PCT

    applied_record = rate_record.model_copy(update={"rate": applied_rate, "product_fee": applied_fee})
    request = build_request(applied_record, inputs, default_base_rate_pct)
    result = price(request, applied_record, policy)

    return RateQuote(
        rate_id=rate_record.id,
        product=rate_record.product,
        result=result,
        applied_rate=applied_rate,
        original_rate=rate_record.rate,
        applied_product_fee=applied_fee,
        original_product_fee=rate_record.product_fee,
    )


def quote_rate_card(
    rates: list[RateRecord],
    inputs: QuoteInputs,
    policy: PricingPolicy = DEFAULT_POLICY,
    default_base_rate_pct: float = DEFAULT_BASE_RATE_PCT,
) -> list[RateQuote]:
    """Price every row of a rate card against the same inputs, in card order."""
    logger.info("Quoting %d rate rows", len(rates))
    return [quote_for_rate(r, inputs, policy, default_base_rate_pct) for r in rates]


def _proc_fee_pct(settings: BrokerSettings | None, requested: float) -> float:
    """Brokers earn their commission as proc fee; direct clients pay none."""
    if settings is None or settings.client_type is None:
        return requested
    if settings.client_type == ClientType.direct:
        return 0.0
    return settings.broker_commission_pct or _DEFAULT_BROKER_COMMISSION_PCT


def _broker_client_fee(settings: BrokerSettings | None, flat_fee: float) -> tuple[BrokerFeeMode, float]:
    if settings is None or not settings.add_fees_toggle or not settings.additional_fee_amount:
        return BrokerFeeMode.flat, flat_fee
    if settings.fee_calculation_type == "percentage":
        return BrokerFeeMode.percent, settings.additional_fee_amount
    return BrokerFeeMode.flat, settings.additional_fee_amount
