from enum import Enum
from typing import Optional

from pydantic import BaseModel

from bridge_pricing.models.rate import RateRecord
from bridge_pricing.models.result import PricingResult


class ClientType(str, Enum):
    broker = "Broker"
    direct = "Direct"


class BrokerSettings(BaseModel):
    """Broker commission and client-fee preferences captured on the quote."""
    client_type: Optional[ClientType] = None
    broker_commission_pct: Optional[float] = None
    add_fees_toggle: bool = False
    additional_fee_amount: Optional[float] = None
    fee_calculation_type: str = "pound"   # "pound" or "percentage"


class QuoteInputs(BaseModel):
    """Borrower inputs shared by every rate row priced for one enquiry."""
    property_value: float
    gross_loan: Optional[float] = None
    use_specific_net: bool = False
    specific_net_loan: Optional[float] = None
    term_months: Optional[int] = None
    base_rate_pct: Optional[float] = None
    monthly_rent: float = 0.0
    top_slicing: float = 0.0
    proc_fee_pct: float = 1.0
    broker_fee_flat: float = 0.0
    broker_client_fee: float = 0.0
    rolled_months_override: Optional[int] = None
    deferred_rate_override: Optional[float] = None
    commitment_fee: float = 0.0
    exit_fee_pct: float = 0.0
    overridden_rate: Optional[float] = None
    product_fee_override_pct: Optional[float] = None
    broker_settings: Optional[BrokerSettings] = None
    charge_type: Optional[str] = None
    first_charge_value: float = 0.0


class RateQuote(BaseModel):
    """Pricing for one rate row, with the rate and fee actually applied."""
    rate_id: Optional[str] = None
    product: Optional[str] = None
    result: PricingResult
    applied_rate: float
    original_rate: Optional[float] = None
    applied_product_fee: float
    original_product_fee: Optional[float] = None


class QuoteRequest(BaseModel):
    """Request body for pricing several rate rows against the same inputs."""
    rates: list[RateRecord]
    inputs: QuoteInputs
