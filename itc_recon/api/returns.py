from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import List
import logging
from pydantic import ValidationError
from itc_recon.api.csv_upload import read_csv_rows
from itc_recon.api.deps import get_stores
from itc_recon.db.memory import Stores
from itc_recon.schemas.gstr2b import ReturnRecord

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/gstr2b/upload")
async def upload_return_dataset(
    file: UploadFile = File(...),
    stores: Stores = Depends(get_stores),
):
    """Replace the GSTR-2B dataset with the uploaded CSV. All rows must be valid."""
    rows = await read_csv_rows(file)

    records: List[ReturnRecord] = []
    for index, row in enumerate(rows):
        try:
            record = ReturnRecord(**row)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Row {index + 2}: {e.errors()[0]['msg']}")
        if not record.invoice_number or not record.supplier_gstin:
            raise HTTPException(status_code=400, detail=f"Row {index + 2}: invoice_number and supplier_gstin are required")
        records.append(record)

    loaded = stores.returns.replace_all(records)
    return {"status": "success", "total_records": loaded}

@router.get("/gstr2b")
async def list_return_dataset(stores: Stores = Depends(get_stores)):
    return [r.model_dump(mode="json") for r in stores.returns.list_all()]
