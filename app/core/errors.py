"""
Error taxonomy shared by the read and write paths
"""

from typing import Any, Dict, List, Optional


class GuestDirectoryError(Exception):
    """Base class for all application errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class AuthError(GuestDirectoryError):
    """Bad or missing admin secret"""

    status_code = 401


class ValidationError(GuestDirectoryError):
    """Submission is missing required fields or carries an oversized file"""

    status_code = 400

    def __init__(
        self,
        message: str,
        missing: Optional[List[str]] = None,
        got: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.missing = missing or []
        self.got = got or {}

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "missing": self.missing, "got": self.got}


class BackendError(GuestDirectoryError):
    """Storage backend failure, tagged with the write step it happened at.

    Steps are ``insert``, ``update``, ``upload`` and ``update-paths``. Read
    failures carry no step.
    """

    status_code = 500

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.step = step

    def to_body(self) -> Dict[str, Any]:
        if self.step is None:
            return {"error": self.message}
        return {"step": self.step, "error": self.message}


class NetworkError(GuestDirectoryError):
    """Client-side fetch failure"""

    status_code = 502
