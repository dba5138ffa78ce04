from pydantic import AliasChoices, BaseModel, Field, field_validator, ValidationInfo
from datetime import date, datetime
from decimal import Decimal
import re
from typing import Optional

GSTIN_PATTERN = r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$"


def is_valid_gstin(value: Optional[str]) -> bool:
    return bool(value) and re.match(GSTIN_PATTERN, value) is not None


class TaxAmounts(BaseModel):
    """Shared tax fields of purchase invoices and supplier-reported return records."""
    invoice_number: Optional[str] = Field(None, validation_alias=AliasChoices("invoice_number", "invoice_no"))
    supplier_gstin: Optional[str] = Field(None, validation_alias=AliasChoices("supplier_gstin", "gstin"))
    invoice_date: Optional[date] = None
    taxable_value: Optional[Decimal] = None
    cgst: Decimal = Decimal("0")
    sgst: Decimal = Decimal("0")
    igst: Decimal = Decimal("0")

    @field_validator('invoice_number', 'supplier_gstin', mode='before')
    @classmethod
    def strip_identifiers(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('invoice_date', mode='before')
    @classmethod
    def validate_date_format(cls, v):
        # CSV cells come through as "" for missing dates
        if v == "":
            return None
        if isinstance(v, str):
            try:
                # strict parsing
                datetime.strptime(v, '%Y-%m-%d')
            except ValueError:
                raise ValueError("Date must be in YYYY-MM-DD format")
        return v

    @field_validator('taxable_value', 'cgst', 'sgst', 'igst', mode='before')
    @classmethod
    def validate_numeric(cls, v, info: ValidationInfo):
        # Strict numeric check for CSV strings
        if isinstance(v, str):
            v = v.strip()
            if v == "":
                return None if info.field_name == "taxable_value" else Decimal("0")
            if not re.match(r'^-?\d+(\.\d+)?$', v):
                raise ValueError(f"{info.field_name} must be strictly numeric")
        return v

    @property
    def total_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst


class Invoice(TaxAmounts):
    """
    A purchase invoice submitted for ITC evaluation.

    Identifier presence is deliberately not enforced here; the eligibility
    evaluator rejects blank identifiers with its own ValidationError.
    """
