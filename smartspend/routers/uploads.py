"""
CSV Upload Router
Parses an uploaded statement and returns normalized transactions
"""
import csv
import logging
from typing import Dict, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from smartspend.core.config import settings
from smartspend.utils.csv_reader import read_csv_records
from smartspend.utils.normalizer import CSV_ALIASES, normalize_batch

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/upload-csv")
async def upload_csv(file: Optional[UploadFile] = File(None)) -> Dict:
    if file is None:
        raise HTTPException(status_code=400, detail="file is required")

    # one byte past the cap is enough to know the file is too large
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"file exceeds {settings.MAX_UPLOAD_BYTES} bytes",
        )

    try:
        records = read_csv_records(content)
        transactions = normalize_batch(records, CSV_ALIASES)
    except csv.Error as e:
        logger.error(f"csv parse error: {str(e)}")
        raise HTTPException(status_code=400, detail="Failed to parse CSV")
    except Exception as e:
        logger.error(f"csv parse error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to parse CSV")

    logger.info(f"Imported {len(transactions)} transactions from {file.filename}")
    return {"transactions": [t.to_dict() for t in transactions]}
