from decimal import Decimal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "ITC Eligibility & Reconciliation Service"

    # Label used in ineligibility reasons, e.g. "Invoice not found in GSTR-2B"
    RETURN_DATASET_NAME: str = "GSTR-2B"

    # Max absolute difference per tax component for an invoice to count as matching
    # its return record. 0 means exact match.
    AMOUNT_TOLERANCE: Decimal = Decimal("0")

    MAX_UPLOAD_ROWS: int = 1000
    LOG_LEVEL: str = "INFO"
    OPENAI_MODEL: str = "gpt-3.5-turbo"

    class Config:
        case_sensitive = True

settings = Settings()
