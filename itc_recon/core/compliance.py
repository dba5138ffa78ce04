from typing import Any, List, Mapping, Optional, Union
import logging
from pydantic import ValidationError as PydanticValidationError
from itc_recon.core import errors
from itc_recon.db.compliance import ComplianceCheckStore
from itc_recon.db.returns import ReturnDataset
from itc_recon.schemas.compliance import CheckStatus, CheckType, ComplianceCheck
from itc_recon.schemas.invoice import is_valid_gstin

logger = logging.getLogger(__name__)

class ComplianceRecorder:
    """
    Append-only log of compliance check outcomes.

    check_type and status are free-form tags; their vocabulary belongs to
    the caller. Store failures (PersistenceError) propagate unchanged.
    """

    def __init__(self, store: ComplianceCheckStore):
        self.store = store

    def record(self, check: Union[ComplianceCheck, Mapping[str, Any]]) -> ComplianceCheck:
        if not isinstance(check, ComplianceCheck):
            try:
                check = ComplianceCheck(**check)
            except PydanticValidationError as e:
                raise errors.ValidationError(f"Invalid compliance check: {e.errors()[0]['msg']}") from e
            except TypeError as e:
                raise errors.ValidationError("Invalid compliance check") from e
        saved = self.store.append(check)
        logger.info(f"Compliance check recorded: {saved.check_type}={saved.status} for {saved.supplier_id}")
        return saved

    def history(self, supplier_id: Optional[str] = None) -> List[ComplianceCheck]:
        checks = self.store.list_all()
        if supplier_id is not None:
            checks = [c for c in checks if c.supplier_id == supplier_id]
        return checks

    def run_supplier_checks(self, supplier_gstin: str, return_dataset: ReturnDataset) -> List[ComplianceCheck]:
        """Record GSTIN_VALIDITY and RETURN_FILED for one supplier."""
        results = []

        valid = is_valid_gstin(supplier_gstin)
        results.append(self.record(ComplianceCheck(
            supplier_id=supplier_gstin,
            check_type=CheckType.GSTIN_VALIDITY.value,
            status=(CheckStatus.PASS if valid else CheckStatus.FAIL).value,
            details="GSTIN format is valid" if valid else "GSTIN does not match the 15-character GSTIN format",
        )))

        filed = return_dataset.has_supplier(supplier_gstin)
        results.append(self.record(ComplianceCheck(
            supplier_id=supplier_gstin,
            check_type=CheckType.RETURN_FILED.value,
            status=(CheckStatus.PASS if filed else CheckStatus.FAIL).value,
            details="Supplier has records in the return dataset" if filed
            else "No records from this supplier in the return dataset",
        )))
        return results
