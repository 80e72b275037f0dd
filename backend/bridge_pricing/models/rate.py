from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ProductKind(str, Enum):
    """Which bridging product is being priced."""
    bridge_var = "bridge-var"    # Monthly margin + bank base rate
    bridge_fix = "bridge-fix"    # Monthly fixed coupon, no base-rate linkage
    fusion = "fusion"            # Annual margin + base rate, deferred interest allowed


class RateRecord(BaseModel):
    """One row of a bridge/fusion rate card, already selected by the caller.

    ``rate`` is a monthly margin for variable bridges, a monthly coupon for
    fixed bridges and an annual margin (excluding base rate) for fusion.
    All percentage fields are in percent, e.g. ``0.55`` for 0.55%.
    """
    model_config = {"frozen": True}

    rate: float
    id: Optional[str] = None
    set_key: Optional[str] = None
    product: Optional[str] = None
    property: Optional[str] = None
    charge_type: Optional[str] = None
    min_loan: Optional[float] = None
    max_loan: Optional[float] = None
    min_ltv: Optional[float] = None
    max_ltv: Optional[float] = None
    erc_1: Optional[float] = None
    erc_2: Optional[float] = None
    min_rolled_months: Optional[int] = None
    max_rolled_months: Optional[int] = None
    max_defer_int: Optional[float] = None
    product_fee: Optional[float] = None
    admin_fee: float = 0.0
    max_term: Optional[int] = None
    full_term: Optional[int] = None
