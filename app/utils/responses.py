"""
Standardized response utilities
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import GuestDirectoryError

logger = logging.getLogger(__name__)

def json_response(body: Any, status_code: int = 200) -> JSONResponse:
    """Create a JSON response"""
    return JSONResponse(content=body, status_code=status_code)

def error_response(error: GuestDirectoryError) -> JSONResponse:
    """Render an application error with its status and body"""
    return json_response(error.to_body(), status_code=error.status_code)

async def guest_directory_error_handler(request: Request, exc: GuestDirectoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return error_response(exc)

def register_error_handlers(app: FastAPI) -> None:
    """Install JSON handlers for the application error taxonomy"""
    app.add_exception_handler(GuestDirectoryError, guest_directory_error_handler)
