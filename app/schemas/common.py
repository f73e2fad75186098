"""
Common Pydantic schemas
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel

class ErrorResponse(BaseModel):
    """Error response schema"""
    error: str
    step: Optional[str] = None

class ValidationErrorResponse(BaseModel):
    """Rejected admin submission"""
    error: str
    missing: List[str]
    got: Dict[str, Any]

class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "ok"
