"""Tests for rate-card quoting — request building, broker settings and overrides."""
import pytest

from bridge_pricing.models.quote import BrokerSettings, ClientType, QuoteInputs
from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import BrokerFeeMode
from bridge_pricing.services.quote_service import (
    build_request,
    product_kind_for,
    quote_for_rate,
    quote_rate_card,
)


def _make_inputs(**overrides) -> QuoteInputs:
    defaults = dict(
        property_value=500_000.0,
        gross_loan=300_000.0,
        term_months=12,
    )
    defaults.update(overrides)
    return QuoteInputs(**defaults)


def _make_rate(**overrides) -> RateRecord:
    defaults = dict(
        id="R1",
        set_key="Bridge_Var",
        product="Resi Portfolio",
        rate=0.55,
        min_rolled_months=3,
        max_rolled_months=18,
        product_fee=2.0,
        max_ltv=75,
    )
    defaults.update(overrides)
    return RateRecord(**defaults)


def _make_fusion_rate(**overrides) -> RateRecord:
    defaults = dict(id="F1", set_key="Fusion", product="Small", rate=4.79, max_defer_int=2.0)
    defaults.update(overrides)
    return RateRecord(**defaults)


# ---------------------------------------------------------------------------
# Product kind
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "set_key, expected",
    [
        ("Fusion", ProductKind.fusion),
        ("Bridge_Var", ProductKind.bridge_var),
        ("bridge_var", ProductKind.bridge_var),
        ("Bridge_Fix", ProductKind.bridge_fix),
        (None, ProductKind.bridge_fix),
    ],
)
def test_product_kind_for(set_key, expected):
    assert product_kind_for(RateRecord(rate=1.0, set_key=set_key)) == expected


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("override, expected", [(None, 3), (1, 3), (6, 6), (20, 12)])
def test_bridge_rolled_months_clamped(override, expected):
    request = build_request(_make_rate(), _make_inputs(rolled_months_override=override))
    assert request.rolled_months == expected


def test_fusion_rolled_months_use_fusion_defaults():
    request = build_request(_make_fusion_rate(), _make_inputs(term_months=None, rolled_months_override=15))
    assert request.product_kind == ProductKind.fusion
    assert request.term_months == 24
    assert request.rolled_months == 12


def test_fusion_deferred_rate_clamped_to_rate_limit():
    request = build_request(_make_fusion_rate(), _make_inputs(deferred_rate_override=3.0))
    assert request.deferred_rate_pct == 2.0


def test_bridge_never_defers():
    request = build_request(_make_rate(), _make_inputs(deferred_rate_override=1.0))
    assert request.deferred_rate_pct == 0.0


def test_term_falls_back_to_rate_max_term():
    request = build_request(_make_rate(max_term=9), _make_inputs(term_months=None))
    assert request.term_months == 9


def test_base_rate_defaults():
    assert build_request(_make_rate(), _make_inputs()).base_rate_pct == 4.0
    assert build_request(_make_rate(), _make_inputs(), default_base_rate_pct=5.25).base_rate_pct == 5.25
    assert build_request(_make_rate(), _make_inputs(base_rate_pct=3.5)).base_rate_pct == 3.5


def test_arrangement_fee_from_product_fee():
    assert build_request(_make_rate(product_fee=1.5), _make_inputs()).arrangement_fee_pct == 1.5
    assert build_request(_make_rate(product_fee=None), _make_inputs()).arrangement_fee_pct == 2.0


def test_second_charge_from_charge_type():
    request = build_request(_make_rate(), _make_inputs(charge_type="Second Charge", first_charge_value=150_000))
    assert request.is_second_charge is True
    assert request.first_charge_value == 150_000
    assert build_request(_make_rate(charge_type="First"), _make_inputs()).is_second_charge is False


# ---------------------------------------------------------------------------
# Broker settings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "settings, expected",
    [
        (None, 1.0),
        (BrokerSettings(), 1.0),
        (BrokerSettings(client_type=ClientType.broker), 0.9),
        (BrokerSettings(client_type=ClientType.broker, broker_commission_pct=1.25), 1.25),
        (BrokerSettings(client_type=ClientType.direct, broker_commission_pct=1.25), 0.0),
    ],
)
def test_proc_fee_from_broker_settings(settings, expected):
    request = build_request(_make_rate(), _make_inputs(broker_settings=settings))
    assert request.proc_fee_pct == expected


def test_percentage_client_fee():
    settings = BrokerSettings(add_fees_toggle=True, additional_fee_amount=1.5, fee_calculation_type="percentage")
    quote = quote_for_rate(_make_rate(), _make_inputs(broker_settings=settings))
    assert quote.result.broker_client_fee == pytest.approx(4_500)


def test_pound_client_fee():
    settings = BrokerSettings(add_fees_toggle=True, additional_fee_amount=995)
    request = build_request(_make_rate(), _make_inputs(broker_settings=settings))
    assert request.broker_client_fee_mode == BrokerFeeMode.flat
    assert request.broker_client_fee == 995


def test_client_fee_ignored_when_toggle_off():
    settings = BrokerSettings(add_fees_toggle=False, additional_fee_amount=995)
    request = build_request(_make_rate(), _make_inputs(broker_settings=settings, broker_client_fee=250))
    assert request.broker_client_fee == 250


# ---------------------------------------------------------------------------
# Quoting
# ---------------------------------------------------------------------------


def test_quote_without_overrides():
    quote = quote_for_rate(_make_rate(), _make_inputs())
    assert quote.rate_id == "R1"
    assert quote.product == "Resi Portfolio"
    assert quote.applied_rate == 0.55
    assert quote.original_rate == 0.55
    assert quote.applied_product_fee == 2.0
    assert quote.result.gross == 300_000


def test_quote_applies_rate_and_fee_overrides():
    quote = quote_for_rate(_make_rate(), _make_inputs(overridden_rate=0.6, product_fee_override_pct=1.5))
    assert quote.applied_rate == 0.6
    assert quote.original_rate == 0.55
    assert quote.applied_product_fee == 1.5
    assert quote.original_product_fee == 2.0
    assert quote.result.full_coupon_rate_monthly == pytest.approx(0.6)
    assert quote.result.arrangement_fee == pytest.approx(4_500)


def test_quote_rate_card_preserves_order():
    rates = [
        _make_rate(id="R1"),
        _make_rate(id="R2", set_key="Bridge_Fix", rate=0.85),
        _make_fusion_rate(id="F1"),
    ]
    quotes = quote_rate_card(rates, _make_inputs(term_months=None))
    assert [q.rate_id for q in quotes] == ["R1", "R2", "F1"]
    assert quotes[1].result.product_kind == ProductKind.bridge_fix
    assert quotes[2].result.term_months == 24
    assert quotes[2].result.tier_name == "Small"


def test_quote_rate_card_specific_net():
    quotes = quote_rate_card(
        [_make_rate(), _make_fusion_rate(max_ltv=75)],
        _make_inputs(gross_loan=None, use_specific_net=True, specific_net_loan=200_000),
    )
    for quote in quotes:
        assert quote.result.net_target_met is True
        assert quote.result.net_loan >= 200_000 - 0.5
