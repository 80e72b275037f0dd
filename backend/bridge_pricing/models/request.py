from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from bridge_pricing.models.rate import ProductKind


class BrokerFeeMode(str, Enum):
    """How the broker client fee is charged."""
    flat = "flat"          # Fixed pound amount
    percent = "percent"    # Percentage of the gross loan


class LoanRequest(BaseModel):
    """Borrower-chosen pricing inputs for a single rate record.

    Either ``gross_loan`` is priced directly, or ``use_specific_net`` is set and
    the gross is solved from ``specific_net_loan``. Percentages are in percent.
    """
    model_config = {"frozen": True}

    product_kind: ProductKind
    property_value: float = Field(ge=0)
    gross_loan: Optional[float] = None
    use_specific_net: bool = False
    specific_net_loan: Optional[float] = None
    term_months: int = Field(default=12, gt=0)
    rolled_months: int = Field(default=0, ge=0)
    deferred_rate_pct: float = Field(default=0.0, ge=0)
    base_rate_pct: float = 4.0
    arrangement_fee_pct: float = Field(default=2.0, ge=0)
    proc_fee_pct: float = Field(default=0.0, ge=0)
    broker_fee_flat: float = Field(default=0.0, ge=0)
    broker_client_fee: float = Field(default=0.0, ge=0)
    broker_client_fee_mode: BrokerFeeMode = BrokerFeeMode.flat
    admin_fee: float = Field(default=0.0, ge=0)
    is_second_charge: bool = False
    first_charge_value: float = Field(default=0.0, ge=0)
    rent_pm: float = Field(default=0.0, ge=0)
    top_slicing_pm: float = Field(default=0.0, ge=0)
    commitment_fee: float = Field(default=0.0, ge=0)
    exit_fee_pct: float = Field(default=0.0, ge=0)

    @property
    def base_rate_annual(self) -> float:
        return self.base_rate_pct / 100

    @property
    def deferred_rate_annual(self) -> float:
        """Deferred interest only exists on fusion; bridges always defer nothing."""
        if self.product_kind != ProductKind.fusion:
            return 0.0
        return self.deferred_rate_pct / 100

    @property
    def effective_rolled_months(self) -> int:
        return min(self.rolled_months, self.term_months)

    @property
    def target_net(self) -> float | None:
        """Target net loan when solving in specific-net mode, else None."""
        if self.use_specific_net and self.specific_net_loan and self.specific_net_loan > 0:
            return self.specific_net_loan
        return None
