#!/usr/bin/env python3
"""Solver sweep — exercises the specific-net solver across a range of targets.

For each product kind and target net loan, solves for gross and tabulates the
status, refine passes, step iterations and how far the priced net overshoots
the target. Any row that hits a safety bound is a solver defect.

Usage:
    cd backend && python scripts/solver_sweep.py
    cd backend && python scripts/solver_sweep.py --min 50000 --max 2000000 --step 50000
    cd backend && python scripts/solver_sweep.py --csv sweep.csv
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

logger = logging.getLogger(__name__)

from bridge_pricing.models.rate import ProductKind, RateRecord
from bridge_pricing.models.request import LoanRequest
from bridge_pricing.pricing import price

# Representative rate rows per product
SAMPLE_RATES: dict[ProductKind, RateRecord] = {
    ProductKind.bridge_var: RateRecord(rate=0.55, max_ltv=75, product="Resi Portfolio"),
    ProductKind.bridge_fix: RateRecord(rate=0.85, max_ltv=75, product="Resi Large Loan"),
    ProductKind.fusion: RateRecord(rate=4.79, max_ltv=75, product="Small", erc_1=3, erc_2=1.5),
}

_SAMPLE_TERMS = {
    ProductKind.bridge_var: (12, 3),
    ProductKind.bridge_fix: (12, 3),
    ProductKind.fusion: (24, 6),
}


def sweep(
    targets: list[float],
    property_value: float = 5_000_000.0,
    kinds: list[ProductKind] | None = None,
) -> pd.DataFrame:
    """Solve every (kind, target) pair and return one row per solve."""
    rows = []
    for kind in kinds or list(ProductKind):
        term, rolled = _SAMPLE_TERMS[kind]
        for target in targets:
            request = LoanRequest(
                product_kind=kind,
                property_value=property_value,
                use_specific_net=True,
                specific_net_loan=target,
                term_months=term,
                rolled_months=rolled,
                proc_fee_pct=1.0,
                admin_fee=195.0,
            )
            result = price(request, SAMPLE_RATES[kind])
            rows.append({
                "product_kind": kind.value,
                "target_net": target,
                "gross": result.gross,
                "net": round(result.net_loan, 2),
                "overshoot": round(result.net_loan - target, 2),
                "status": result.net_target_status.value,
                "refine_passes": result.solver_refine_passes,
                "step_iterations": result.solver_step_iterations,
                "bound_hit": result.solver_bound_hit,
            })
    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Sweep the specific-net solver over target net loans")
    parser.add_argument("--min", type=float, default=25_000, help="Smallest target net (default: 25,000)")
    parser.add_argument("--max", type=float, default=1_500_000, help="Largest target net (default: 1,500,000)")
    parser.add_argument("--step", type=float, default=25_000, help="Target increment (default: 25,000)")
    parser.add_argument("--csv", help="Optional CSV output path")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")

    targets = []
    t = args.min
    while t <= args.max:
        targets.append(t)
        t += args.step

    df = sweep(targets)
    summary = df.groupby("product_kind").agg(
        solves=("target_net", "count"),
        max_refine=("refine_passes", "max"),
        max_steps=("step_iterations", "max"),
        max_overshoot=("overshoot", "max"),
        unmet=("status", lambda s: int((s != "met").sum())),
    )
    print(summary.to_string())

    bound_rows = df[df["bound_hit"]]
    if not bound_rows.empty:
        logger.warning("%d solves hit a safety bound:\n%s", len(bound_rows), bound_rows.to_string(index=False))

    if args.csv:
        df.to_csv(args.csv, index=False)
        logger.info("Wrote %d rows to %s", len(df), args.csv)


if __name__ == "__main__":
    main()
