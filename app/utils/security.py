"""
Security utilities and authentication
"""

import secrets

from fastapi import Depends
from fastapi.security import APIKeyHeader

from app.core.config import settings
from app.core.errors import AuthError

admin_secret_header = APIKeyHeader(name="x-admin-secret", auto_error=False)

def verify_admin_secret(secret: str | None = Depends(admin_secret_header)) -> str:
    """Verify the shared admin secret header"""
    if not secret or not secrets.compare_digest(secret, settings.ADMIN_SECRET):
        raise AuthError("Unauthorized: bad x-admin-secret")
    return secret
