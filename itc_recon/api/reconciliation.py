from fastapi import APIRouter, Depends, HTTPException, Query
from decimal import Decimal
from typing import Optional
import logging
from itc_recon.api.deps import get_stores
from itc_recon.core import errors
from itc_recon.core.reconciliation import reconcile_invoices, summarize
from itc_recon.db.memory import Stores
from itc_recon.schemas.reconciliation import ReconciliationSummary

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/reconciliation/run", response_model=ReconciliationSummary)
async def run_reconciliation(
    tolerance: Optional[Decimal] = Query(None, ge=0),
    stores: Stores = Depends(get_stores),
):
    """Recompute every transaction row from the stored invoices and the current GSTR-2B dataset."""
    try:
        transactions = reconcile_invoices(stores.invoices.list_all(), stores.returns, tolerance)
    except errors.ReturnLookupError as e:
        logger.error(f"Reconciliation inconclusive: {e.message}")
        raise HTTPException(
            status_code=503,
            detail={"outcome": "INCONCLUSIVE", "error_kind": e.kind, "detail": e.message},
        )

    stores.transactions.replace_all(transactions)
    return summarize(transactions)

@router.get("/reconciliation/transactions")
async def list_transactions(stores: Stores = Depends(get_stores)):
    return [t.model_dump(mode="json") for t in stores.transactions.list_all()]

@router.get("/reconciliation/summary", response_model=ReconciliationSummary)
async def get_summary(stores: Stores = Depends(get_stores)):
    return summarize(stores.transactions.list_all())
