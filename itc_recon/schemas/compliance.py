from pydantic import BaseModel, Field
from datetime import datetime
import uuid
from enum import Enum

class CheckType(str, Enum):
    """Check types recorded by this service. Callers may record any other tag."""
    GSTIN_VALIDITY = "GSTIN_VALIDITY"
    RETURN_FILED = "RETURN_FILED"
    ITC_ELIGIBILITY = "ITC_ELIGIBILITY"

class CheckStatus(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    INCONCLUSIVE = "INCONCLUSIVE"

class ComplianceCheck(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    supplier_id: str
    check_type: str
    status: str
    details: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)
