from fastapi import Depends, Request
from itc_recon.core.compliance import ComplianceRecorder
from itc_recon.core.eligibility import EligibilityEvaluator
from itc_recon.core.itc import ITCService
from itc_recon.db.memory import Stores

def get_stores(request: Request) -> Stores:
    return request.app.state.stores

def get_recorder(stores: Stores = Depends(get_stores)) -> ComplianceRecorder:
    return ComplianceRecorder(stores.compliance)

def get_evaluator(stores: Stores = Depends(get_stores)) -> EligibilityEvaluator:
    return EligibilityEvaluator(stores.invoices, stores.returns)

def get_itc_service(
    evaluator: EligibilityEvaluator = Depends(get_evaluator),
    recorder: ComplianceRecorder = Depends(get_recorder),
) -> ITCService:
    return ITCService(evaluator, recorder)
