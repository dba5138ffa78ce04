from enum import Enum
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

class VerificationStatus(str, Enum):
    VERIFIED = "VERIFIED"
    NOT_FOUND = "NOT_FOUND"

class EligibilityVerdict(BaseModel):
    is_eligible: bool
    verification_status: VerificationStatus
    eligible_amount: Decimal = Decimal("0")
    reasons: List[str] = Field(default_factory=list)

class OutcomeKind(str, Enum):
    DETERMINED = "DETERMINED"      # eligible or not, with reasons
    REJECTED = "REJECTED"          # invalid or duplicate submission
    INCONCLUSIVE = "INCONCLUSIVE"  # storage or lookup fault, no verdict

class EligibilityOutcome(BaseModel):
    kind: OutcomeKind
    invoice_number: Optional[str] = None
    supplier_gstin: Optional[str] = None
    verdict: Optional[EligibilityVerdict] = None
    error_kind: Optional[str] = None
    detail: Optional[str] = None
