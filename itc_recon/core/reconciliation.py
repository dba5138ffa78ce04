from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging
from itc_recon.core.config import settings
from itc_recon.db.returns import ReturnDataset
from itc_recon.schemas.invoice import Invoice
from itc_recon.schemas.gstr2b import ReturnRecord
from itc_recon.schemas.reconciliation import (
    ReconciliationStatus, ReconciliationSummary, Transaction, TransactionCandidate
)

# AUTHORITATIVE RECONCILIATION ENGINE – DO NOT DUPLICATE
# Every matched/unmatched/partial decision goes through classify().

logger = logging.getLogger(__name__)

COMPARED_FIELDS = ("cgst", "sgst", "igst")


def classify(candidate: TransactionCandidate) -> ReconciliationStatus:
    """
    Pure, total over both flags.

    Found with agreeing amounts is matched, found with different amounts is
    partial (supplier filed different figures), not found is always unmatched.
    """
    if not candidate.found_in_return_dataset:
        return ReconciliationStatus.UNMATCHED
    if candidate.invoice_match:
        return ReconciliationStatus.MATCHED
    return ReconciliationStatus.PARTIAL


def summarize(candidates: Iterable[TransactionCandidate]) -> ReconciliationSummary:
    counts = {status: 0 for status in ReconciliationStatus}
    for candidate in candidates:
        counts[classify(candidate)] += 1
    return ReconciliationSummary(
        matched_count=counts[ReconciliationStatus.MATCHED],
        unmatched_count=counts[ReconciliationStatus.UNMATCHED],
        partial_count=counts[ReconciliationStatus.PARTIAL],
        total=sum(counts.values()),
    )


def _tolerance(tolerance: Optional[Decimal]) -> Decimal:
    return Decimal(str(settings.AMOUNT_TOLERANCE if tolerance is None else tolerance))


def amount_differences(invoice: Invoice, record: ReturnRecord, tolerance: Optional[Decimal] = None) -> Dict[str, Decimal]:
    """Invoice minus return record for each compared field outside tolerance."""
    limit = _tolerance(tolerance)
    fields = list(COMPARED_FIELDS)
    if invoice.taxable_value is not None and record.taxable_value is not None:
        fields.append("taxable_value")

    diffs = {}
    for name in fields:
        delta = getattr(invoice, name) - getattr(record, name)
        if abs(delta) > limit:
            diffs[name] = delta
    return diffs


def amounts_match(invoice: Invoice, record: ReturnRecord, tolerance: Optional[Decimal] = None) -> bool:
    return not amount_differences(invoice, record, tolerance)


def build_transaction(
    invoice: Invoice,
    record: Optional[ReturnRecord],
    tolerance: Optional[Decimal] = None,
    check_date: Optional[date] = None,
) -> Transaction:
    limit = _tolerance(tolerance)
    diffs = amount_differences(invoice, record, limit) if record is not None else {}
    candidate = TransactionCandidate(
        found_in_return_dataset=record is not None,
        invoice_match=record is not None and not diffs,
    )

    supplier_details = invoice.supplier_gstin
    if record is not None and record.supplier_name:
        supplier_details = f"{record.supplier_name} ({invoice.supplier_gstin})"

    return Transaction(
        date=invoice.invoice_date,
        invoice_number=invoice.invoice_number,
        supplier_gstin=invoice.supplier_gstin,
        amount=invoice.total_tax,
        status=classify(candidate),
        check_date=check_date or date.today(),
        found_in_return_dataset=candidate.found_in_return_dataset,
        invoice_match=candidate.invoice_match,
        supplier_details=supplier_details,
        differences=diffs,
        amount_tolerance=limit,
    )


def reconcile_invoices(
    invoices: Iterable[Invoice],
    return_dataset: ReturnDataset,
    tolerance: Optional[Decimal] = None,
    check_date: Optional[date] = None,
) -> List[Transaction]:
    """
    Build one Transaction per invoice.

    A ReturnLookupError from the dataset aborts the whole batch; a fault must
    never show up as an unmatched row.
    """
    check_date = check_date or date.today()
    transactions = [
        build_transaction(inv, return_dataset.lookup(inv.invoice_number, inv.supplier_gstin), tolerance, check_date)
        for inv in invoices
    ]
    logger.info(f"Reconciliation COMPLETED. Count: {len(transactions)}")
    return transactions
