"""
Admin API routes - requires authentication
"""

from typing import Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.db import get_db
from app.schemas.guest import SaveResponse
from app.services.guest_service import GuestService, MediaFile
from app.services.media import MEDIA_SLOTS
from app.services.storage import StorageBackend, get_storage
from app.utils.security import verify_admin_secret

router = APIRouter()

@router.post("/guest", response_model=SaveResponse)
async def save_guest(
    request: Request,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    secret: str = Depends(verify_admin_secret)
):
    """Create or update a guest and upload any attached photo and audio clips"""
    form = await request.form()

    files: Dict[str, MediaFile] = {}
    for slot in MEDIA_SLOTS:
        part = form.get(slot.field)
        if isinstance(part, UploadFile):
            files[slot.field] = MediaFile(
                data=await part.read(),
                content_type=part.content_type,
                filename=part.filename
            )

    text_fields = {
        key: value for key, value in form.items()
        if not isinstance(value, UploadFile)
    }

    submission = GuestService.validate_submission(text_fields, files)
    guest_id = GuestService.save_guest(db, storage, submission, files)

    return SaveResponse(id=guest_id)
