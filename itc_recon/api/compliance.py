from fastapi import APIRouter, Depends
from typing import List, Optional
from pydantic import BaseModel
from itc_recon.api.deps import get_recorder, get_stores
from itc_recon.core.compliance import ComplianceRecorder
from itc_recon.db.memory import Stores
from itc_recon.schemas.compliance import ComplianceCheck

router = APIRouter()

class ComplianceCheckRequest(BaseModel):
    supplier_id: str
    check_type: str
    status: str
    details: str = ""

@router.post("/compliance/checks", response_model=ComplianceCheck, status_code=201)
async def record_check(
    request: ComplianceCheckRequest,
    recorder: ComplianceRecorder = Depends(get_recorder),
):
    return recorder.record(request.model_dump())

@router.get("/compliance/checks", response_model=List[ComplianceCheck])
async def list_checks(
    supplier_id: Optional[str] = None,
    recorder: ComplianceRecorder = Depends(get_recorder),
):
    return recorder.history(supplier_id)

@router.post("/compliance/suppliers/{supplier_gstin}/checks", response_model=List[ComplianceCheck], status_code=201)
async def run_supplier_checks(
    supplier_gstin: str,
    recorder: ComplianceRecorder = Depends(get_recorder),
    stores: Stores = Depends(get_stores),
):
    return recorder.run_supplier_checks(supplier_gstin, stores.returns)
