from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from typing import Any, Dict
import logging
from itc_recon.api.csv_upload import read_csv_rows
from itc_recon.api.deps import get_itc_service, get_stores
from itc_recon.core import errors
from itc_recon.core.itc import ITCService
from itc_recon.db.memory import Stores
from itc_recon.schemas.eligibility import OutcomeKind

router = APIRouter()
logger = logging.getLogger(__name__)

# Rejections are the caller's fault, inconclusive outcomes are ours
REJECTION_STATUS = {
    errors.ValidationError.kind: 422,
    errors.DuplicateInvoiceError.kind: 409,
}

@router.post("/invoices/eligibility")
async def check_eligibility(
    invoice: Dict[str, Any] = Body(...),
    service: ITCService = Depends(get_itc_service),
):
    """
    Evaluate a single invoice for ITC.

    200 means a determination was made, eligible or not. Failures keep their
    kind: 422/409 for rejected input, 503 when evaluation was inconclusive.
    """
    outcome = service.submit(invoice)

    if outcome.kind == OutcomeKind.REJECTED:
        raise HTTPException(
            status_code=REJECTION_STATUS.get(outcome.error_kind, 400),
            detail=outcome.model_dump(mode="json"),
        )
    if outcome.kind == OutcomeKind.INCONCLUSIVE:
        raise HTTPException(status_code=503, detail=outcome.model_dump(mode="json"))

    return outcome.model_dump(mode="json")

@router.post("/invoices/upload")
async def upload_invoices(
    file: UploadFile = File(...),
    service: ITCService = Depends(get_itc_service),
):
    rows = await read_csv_rows(file)

    outcomes = [service.submit(row) for row in rows]
    counts = {kind.value: 0 for kind in OutcomeKind}
    eligible_count = 0
    for outcome in outcomes:
        counts[outcome.kind.value] += 1
        if outcome.verdict is not None and outcome.verdict.is_eligible:
            eligible_count += 1

    logger.info(f"Invoice upload COMPLETED. Rows: {len(rows)}, outcomes: {counts}")

    return {
        "status": "success",
        "total_invoices": len(rows),
        "eligible_count": eligible_count,
        "outcome_counts": counts,
        "outcomes": [o.model_dump(mode="json") for o in outcomes],
    }

@router.get("/invoices")
async def list_invoices(stores: Stores = Depends(get_stores)):
    return [inv.model_dump(mode="json") for inv in stores.invoices.list_all()]
