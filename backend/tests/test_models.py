import pytest
from pydantic import ValidationError

from bridge_pricing.models.policy import DEFAULT_POLICY, PricingPolicy
from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import BrokerFeeMode, LoanRequest
from bridge_pricing.models.result import NetTargetStatus, PricingResult


def test_loan_request_defaults():
    request = LoanRequest(product_kind=ProductKind.bridge_var, property_value=500_000, gross_loan=300_000)
    assert request.term_months == 12
    assert request.rolled_months == 0
    assert request.base_rate_pct == 4.0
    assert request.arrangement_fee_pct == 2.0
    assert request.broker_client_fee_mode == BrokerFeeMode.flat
    assert request.is_second_charge is False
    assert request.target_net is None


def test_loan_request_accepts_kind_strings():
    request = LoanRequest(product_kind="fusion", property_value=1_000_000)
    assert request.product_kind == ProductKind.fusion


def test_loan_request_rejects_unknown_kind():
    with pytest.raises(ValidationError):
        LoanRequest(product_kind="mortgage", property_value=500_000)


def test_loan_request_rejects_zero_term():
    with pytest.raises(ValidationError):
        LoanRequest(product_kind=ProductKind.bridge_fix, property_value=500_000, term_months=0)


def test_loan_request_rejects_negative_property_value():
    with pytest.raises(ValidationError):
        LoanRequest(product_kind=ProductKind.bridge_fix, property_value=-1)


def test_loan_request_is_frozen():
    request = LoanRequest(product_kind=ProductKind.bridge_fix, property_value=500_000)
    with pytest.raises(ValidationError):
        request.gross_loan = 100_000


def test_deferred_rate_only_applies_to_fusion():
    bridge = LoanRequest(product_kind=ProductKind.bridge_var, property_value=500_000, deferred_rate_pct=2.0)
    fusion = LoanRequest(product_kind=ProductKind.fusion, property_value=500_000, deferred_rate_pct=2.0)
    assert bridge.deferred_rate_annual == 0.0
    assert fusion.deferred_rate_annual == pytest.approx(0.02)


def test_effective_rolled_months_capped_at_term():
    request = LoanRequest(product_kind=ProductKind.bridge_fix, property_value=500_000, term_months=9, rolled_months=12)
    assert request.effective_rolled_months == 9


@pytest.mark.parametrize(
    "use_specific_net, specific_net_loan, expected",
    [
        (True, 250_000, 250_000),
        (True, 0, None),
        (True, None, None),
        (False, 250_000, None),
    ],
)
def test_target_net(use_specific_net, specific_net_loan, expected):
    request = LoanRequest(
        product_kind=ProductKind.bridge_fix,
        property_value=500_000,
        use_specific_net=use_specific_net,
        specific_net_loan=specific_net_loan,
    )
    assert request.target_net == expected


def test_rate_record_requires_rate():
    with pytest.raises(ValidationError):
        RateRecord(product="Resi")


def test_rate_record_minimal():
    record = RateRecord(rate=0.55)
    assert record.max_ltv is None
    assert record.admin_fee == 0.0


def test_policy_defaults():
    assert DEFAULT_POLICY.solver_step == 1000.0
    assert DEFAULT_POLICY.ltv_bucket_bounds == (60, 70, 75)
    assert DEFAULT_POLICY.second_charge_max_combined_ltv == 0.70
    assert DEFAULT_POLICY.title_insurance_floor == 392.0


def test_policy_override():
    policy = PricingPolicy(solver_max_steps=50)
    assert policy.solver_max_steps == 50
    assert policy.solver_step == DEFAULT_POLICY.solver_step


def test_pricing_result_serializes_enums_as_values():
    result = PricingResult(product_kind=ProductKind.fusion, net_target_status=NetTargetStatus.capped_short)
    data = result.model_dump(mode="json")
    assert data["product_kind"] == "fusion"
    assert data["net_target_status"] == "capped_short"
    assert data["title_insurance"] is None
