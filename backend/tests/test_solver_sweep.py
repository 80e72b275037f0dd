"""Tests for the solver sweep script."""
from bridge_pricing.models.rate import ProductKind
from scripts.solver_sweep import sweep


def test_sweep_meets_every_target():
    df = sweep([50_000, 250_000, 750_000, 1_500_000])
    assert len(df) == 12
    assert set(df["product_kind"]) == {k.value for k in ProductKind}
    assert (df["status"] == "met").all()
    assert not df["bound_hit"].any()
    assert (df["overshoot"] >= -0.5).all()
    assert (df["refine_passes"] <= 10).all()


def test_sweep_single_kind():
    df = sweep([100_000], kinds=[ProductKind.fusion])
    assert list(df["product_kind"]) == ["fusion"]
    assert df.iloc[0]["gross"] % 1000 == 0
