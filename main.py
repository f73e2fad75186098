"""
Wedding Guest Directory - FastAPI Backend
Main application entry point
"""

import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base, get_db
from app.api import routes_admin, routes_public
from app.services.gallery import build_gallery
from app.services.storage import StorageBackend, get_storage
from app.utils.responses import register_error_handlers

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not settings.USE_FIREBASE:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Wedding Guest Directory",
    description="Bilingual wedding guest gallery with photo and audio intros",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Local object store is served directly; Firebase buckets are public on their own
if not settings.USE_FIREBASE:
    os.makedirs(settings.MEDIA_ROOT, exist_ok=True)
    app.mount("/media", StaticFiles(directory=settings.MEDIA_ROOT), name="media")

# Setup templates
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

@app.get("/", response_class=HTMLResponse)
async def gallery(
    request: Request,
    lang: Optional[str] = None,
    guest: Optional[int] = None,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """Guest gallery with the detail overlay of ?guest=<id> open"""
    page = build_gallery(db, storage, lang=lang, guest=guest)
    return templates.TemplateResponse("gallery.html", {
        "request": request,
        "title": "Wedding Guests",
        "page": page
    })

@app.get("/admin", response_class=HTMLResponse)
async def admin_panel(request: Request):
    """Admin form for creating and editing guests"""
    return templates.TemplateResponse("admin.html", {
        "request": request,
        "title": "Admin - Upload Guest"
    })

@app.get("/sw.js")
async def service_worker(request: Request):
    """Service worker caching photo and audio responses"""
    return templates.TemplateResponse("sw.js", {
        "request": request,
        "cache_name": settings.MEDIA_CACHE_NAME,
        "storage_base": settings.storage_public_base
    }, media_type="application/javascript", headers={"Service-Worker-Allowed": "/"})

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
