from fastapi import APIRouter, Body
from itc_recon.schemas.explanation import ExplainRequest, ExplainResponse
from itc_recon.core.ai import generate_explanation

router = APIRouter()

@router.post("/explain-mismatch", response_model=ExplainResponse)
async def explain_mismatch(request: ExplainRequest = Body(...)):
    """
    Generate an AI-powered explanation for a partial or unmatched transaction.
    This is a read-only operation and does not alter the reconciliation status.
    """
    return generate_explanation(request)
