import logging
from itc_recon.core.compliance import ComplianceRecorder
from itc_recon.core.eligibility import EligibilityEvaluator, InvoiceInput
from itc_recon.schemas.compliance import CheckStatus, CheckType, ComplianceCheck
from itc_recon.schemas.eligibility import EligibilityOutcome, OutcomeKind

logger = logging.getLogger(__name__)

class ITCService:
    """Evaluates a submitted invoice and records the decision in the compliance log."""

    def __init__(self, evaluator: EligibilityEvaluator, recorder: ComplianceRecorder):
        self.evaluator = evaluator
        self.recorder = recorder

    def submit(self, invoice: InvoiceInput) -> EligibilityOutcome:
        outcome = self.evaluator.try_evaluate(invoice)

        # Rejected submissions never reach storage, the audit log included
        if outcome.kind == OutcomeKind.REJECTED:
            logger.info(f"Submission rejected: {outcome.invoice_number} ({outcome.error_kind})")
            return outcome

        if outcome.kind == OutcomeKind.DETERMINED:
            verdict = outcome.verdict
            status = verdict.verification_status.value
            if verdict.is_eligible:
                details = f"Invoice {outcome.invoice_number}: eligible ITC {verdict.eligible_amount}"
            else:
                details = f"Invoice {outcome.invoice_number}: " + "; ".join(verdict.reasons)
        else:
            status = CheckStatus.INCONCLUSIVE.value
            details = f"Invoice {outcome.invoice_number}: {outcome.error_kind} {outcome.detail}"

        self.recorder.record(ComplianceCheck(
            supplier_id=outcome.supplier_gstin,
            check_type=CheckType.ITC_ELIGIBILITY.value,
            status=status,
            details=details,
        ))
        return outcome
