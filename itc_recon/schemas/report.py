from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal
from itc_recon.schemas.compliance import ComplianceCheck
from itc_recon.schemas.reconciliation import ReconciliationSummary, Transaction
from itc_recon.schemas.supplier import SupplierRiskSummary

# Any change to this schema must be reflected in BOTH the JSON and PDF report formats.

class CreditTotals(BaseModel):
    claimed_itc_amount: Decimal = Decimal("0")
    substantiated_itc_amount: Decimal = Decimal("0")
    at_risk_itc_amount: Decimal = Decimal("0")

class ReportAudit(BaseModel):
    generated_at: datetime = Field(default_factory=datetime.utcnow)
    report_id: str
    return_dataset: str
    amount_tolerance: Decimal

class ReportResponse(BaseModel):
    summary: ReconciliationSummary
    credit: CreditTotals
    supplier_summary: List[SupplierRiskSummary] = []
    transactions: List[Transaction] = []
    compliance_checks: List[ComplianceCheck] = []
    audit: ReportAudit
