"""
Pydantic schemas package
"""

from .common import *
from .guest import *

__all__ = [
    "ErrorResponse",
    "ValidationErrorResponse",
    "HealthResponse",
    "BilingualText",
    "AudioPair",
    "GuestView",
    "GuestListResponse",
    "GuestSubmission",
    "SaveResponse",
    "ManifestResponse"
]
