"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.common import HealthResponse
from app.schemas.guest import GuestListResponse, ManifestResponse
from app.services.guest_service import GuestService
from app.services.storage import StorageBackend, get_storage

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse()

@router.get("/guests", response_model=GuestListResponse)
async def list_guests(
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """All guests ordered by number, with public media URLs"""
    return GuestListResponse(items=GuestService.list_guests(db, storage))

@router.get("/manifest/all", response_model=ManifestResponse)
async def media_manifest(
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """Every public photo and audio URL, for offline precaching"""
    return ManifestResponse(urls=GuestService.media_urls(db, storage))
