from fastapi import HTTPException, UploadFile
from typing import Dict, List
import csv
import io
from itc_recon.core.config import settings

async def read_csv_rows(file: UploadFile) -> List[Dict[str, str]]:
    """Decode an uploaded CSV into stripped row dicts, enforcing the row limit."""
    if not file.filename or not file.filename.endswith('.csv'):
        raise HTTPException(status_code=400, detail="Invalid file format.")

    content = await file.read()
    try:
        decoded_content = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Invalid encoding.")

    csv_reader = csv.DictReader(io.StringIO(decoded_content))
    rows = [
        {k.strip(): (v or "").strip() for k, v in row.items() if k}
        for row in csv_reader
    ]
    if len(rows) > settings.MAX_UPLOAD_ROWS:
        raise HTTPException(status_code=413, detail=f"Row limit exceeded ({settings.MAX_UPLOAD_ROWS})")
    return rows
