from typing import Any, Mapping, Optional, Union
import logging
from pydantic import ValidationError as PydanticValidationError
from itc_recon.core import errors
from itc_recon.core.config import settings
from itc_recon.db.invoices import InvoiceStore
from itc_recon.db.returns import ReturnDataset
from itc_recon.schemas.invoice import Invoice
from itc_recon.schemas.eligibility import EligibilityVerdict, EligibilityOutcome, OutcomeKind, VerificationStatus

logger = logging.getLogger(__name__)

InvoiceInput = Union[Invoice, Mapping[str, Any]]


def coerce_invoice(invoice: InvoiceInput) -> Invoice:
    """Build an Invoice from a mapping and reject blank identifiers."""
    if invoice is None:
        raise errors.ValidationError("Invalid invoice data provided")
    if not isinstance(invoice, Invoice):
        try:
            invoice = Invoice(**invoice)
        except PydanticValidationError as e:
            raise errors.ValidationError(f"Invalid invoice data provided: {e.errors()[0]['msg']}") from e
        except TypeError as e:
            raise errors.ValidationError("Invalid invoice data provided") from e

    missing = [
        name for name in ("invoice_number", "supplier_gstin")
        if not (getattr(invoice, name) or "").strip()
    ]
    if missing:
        raise errors.ValidationError(f"Missing required field(s): {', '.join(missing)}")
    return invoice


class EligibilityEvaluator:
    """
    Decides ITC eligibility for one invoice against the return dataset.

    Each successful call stores the invoice exactly once, so the evaluator is
    not idempotent: a second call for the same invoice number and supplier is
    rejected as a duplicate. Uniqueness is guaranteed by the invoice store's
    insert, the read beforehand only gives an early, friendlier rejection.
    No failure is recovered here.
    """

    def __init__(self, invoice_store: InvoiceStore, return_dataset: ReturnDataset, dataset_name: Optional[str] = None):
        self.invoice_store = invoice_store
        self.return_dataset = return_dataset
        self.dataset_name = dataset_name or settings.RETURN_DATASET_NAME

    def evaluate(self, invoice: InvoiceInput) -> EligibilityVerdict:
        # 1. Validate before touching storage
        invoice = coerce_invoice(invoice)
        number, gstin = invoice.invoice_number, invoice.supplier_gstin

        # 2. Same number from the same supplier is a duplicate.
        # Same number from a different supplier is legitimate.
        existing = self.invoice_store.find_by_invoice_number(number)
        if existing is not None and existing.supplier_gstin == gstin:
            logger.warning(f"Duplicate invoice rejected: {number} from {gstin}")
            raise errors.DuplicateInvoiceError(
                "Invoice with the same number and supplier GSTIN already exists"
            )

        # 3. Persist. A uniqueness violation here means a concurrent submission won.
        try:
            self.invoice_store.insert(invoice)
        except errors.UniqueConstraintViolation as e:
            logger.warning(f"Duplicate invoice rejected at insert: {number} from {gstin}")
            raise errors.DuplicateInvoiceError(
                "Invoice with the same number and supplier GSTIN already exists"
            ) from e

        # 4. Look up the supplier's filed record
        record = self.return_dataset.lookup(number, gstin)

        # 5/6. Verdict
        if record is not None:
            verdict = EligibilityVerdict(
                is_eligible=True,
                verification_status=VerificationStatus.VERIFIED,
                eligible_amount=invoice.total_tax,
                reasons=[],
            )
        else:
            verdict = EligibilityVerdict(
                is_eligible=False,
                verification_status=VerificationStatus.NOT_FOUND,
                reasons=[f"Invoice not found in {self.dataset_name}"],
            )

        logger.info(
            f"ITC evaluated: {number} ({gstin}) -> {verdict.verification_status.value}, "
            f"eligible_amount={verdict.eligible_amount}"
        )
        return verdict

    def try_evaluate(self, invoice: InvoiceInput) -> EligibilityOutcome:
        """
        Like ``evaluate`` but returns an EligibilityOutcome instead of raising
        for the known failure kinds, keeping "rejected" and "inconclusive"
        separate from a real determination.
        """
        number = gstin = None
        if isinstance(invoice, Invoice):
            number, gstin = invoice.invoice_number, invoice.supplier_gstin
        elif isinstance(invoice, Mapping):
            number = invoice.get("invoice_number", invoice.get("invoice_no"))
            gstin = invoice.get("supplier_gstin", invoice.get("gstin"))
        number = str(number).strip() if number is not None else None
        gstin = str(gstin).strip() if gstin is not None else None

        try:
            verdict = self.evaluate(invoice)
        except (errors.ValidationError, errors.DuplicateInvoiceError) as e:
            return EligibilityOutcome(
                kind=OutcomeKind.REJECTED, invoice_number=number, supplier_gstin=gstin,
                error_kind=e.kind, detail=e.message,
            )
        except (errors.PersistenceError, errors.ReturnLookupError) as e:
            logger.error(f"ITC evaluation inconclusive for {number} ({gstin}): {e.kind} {e.message}")
            return EligibilityOutcome(
                kind=OutcomeKind.INCONCLUSIVE, invoice_number=number, supplier_gstin=gstin,
                error_kind=e.kind, detail=e.message,
            )

        return EligibilityOutcome(
            kind=OutcomeKind.DETERMINED, invoice_number=number, supplier_gstin=gstin, verdict=verdict
        )
