"""
Image upload endpoint
"""
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from runbook_checklist.controllers.base_controller import BaseController
from runbook_checklist.core.config import settings
from runbook_checklist.core.logging import get_logger
from runbook_checklist.core.metrics import record_upload
from runbook_checklist.schemas.upload import UploadResponse
from runbook_checklist.services.upload_storage import UploadStorage, UploadTooLarge

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=UploadResponse)
def upload_file(file: Optional[UploadFile] = File(None)):
    """Store one file and return the URL it is served from"""
    if file is None:
        record_upload("missing")
        raise BaseController.bad_request("No file uploaded")

    storage = UploadStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX, settings.MAX_FILE_SIZE)
    try:
        url = storage.save(file.file, file.filename)
    except UploadTooLarge as e:
        record_upload("too_large")
        logger.warning(f"Rejected upload {file.filename!r}: {e}")
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)) from e
    finally:
        file.file.close()

    record_upload("stored")
    return UploadResponse(url=url)
