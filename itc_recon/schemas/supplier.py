from enum import Enum
from decimal import Decimal
from pydantic import BaseModel

class SupplierRiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

class SupplierRiskSummary(BaseModel):
    supplier_gstin: str
    total_invoices: int
    matched_count: int
    partial_count: int
    unmatched_count: int
    claimed_itc_amount: Decimal
    substantiated_itc_amount: Decimal
    at_risk_itc_amount: Decimal
    risk_level: SupplierRiskLevel
