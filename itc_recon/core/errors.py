"""
Error taxonomy for ITC evaluation.

Callers must be able to tell a business determination ("not eligible") apart
from an operational fault ("could not evaluate"). Every error carries a
stable ``kind`` tag so the distinction survives serialization.
"""


class ITCError(Exception):
    kind = "ITC_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ITCError, ValueError):
    """Malformed or missing invoice fields. Raised before any storage access."""
    kind = "VALIDATION_ERROR"


class DuplicateInvoiceError(ITCError):
    """Same invoice_number + supplier_gstin already recorded."""
    kind = "DUPLICATE_INVOICE"


class PersistenceError(ITCError):
    """Storage write failure. The evaluation is inconclusive."""
    kind = "PERSISTENCE_ERROR"


class UniqueConstraintViolation(PersistenceError):
    """Raised by a store when an insert would break (invoice_number, supplier_gstin) uniqueness."""
    kind = "UNIQUE_CONSTRAINT"


class ReturnLookupError(ITCError, LookupError):
    """Return dataset query failed. Distinct from the record being absent."""
    kind = "LOOKUP_ERROR"
