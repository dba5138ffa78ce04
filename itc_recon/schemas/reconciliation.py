from enum import Enum
import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional, Dict

class ReconciliationStatus(str, Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    PARTIAL = "partial"

class TransactionCandidate(BaseModel):
    found_in_return_dataset: bool = False
    invoice_match: bool = False

class Transaction(BaseModel):
    date: Optional[datetime.date] = None
    invoice_number: str
    supplier_gstin: str
    amount: Decimal = Decimal("0")
    status: ReconciliationStatus
    check_date: datetime.date
    found_in_return_dataset: bool
    invoice_match: bool
    supplier_details: str = "-"
    # invoice minus return record, only for fields outside tolerance
    differences: Dict[str, Decimal] = Field(default_factory=dict)
    # tolerance the run compared amounts with
    amount_tolerance: Decimal = Decimal("0")

class ReconciliationSummary(BaseModel):
    matched_count: int = 0
    unmatched_count: int = 0
    partial_count: int = 0
    total: int = 0
