"""Base exception classes for gcad-preview.

Every error carries a machine-readable ``code``, a human-readable
``message`` and an optional ``details`` mapping so callers (notably the web
host) can turn it into a structured response without string parsing.
"""

from typing import Any, Dict, Optional


class GcadPreviewError(Exception):
    """Root of the gcad-preview exception hierarchy."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error_code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:
        return self.message


class ValidationError(GcadPreviewError):
    """Raised when input fails validation."""

    pass


class ResourceNotFoundError(GcadPreviewError):
    """Raised when a named resource does not exist."""

    pass


class ConfigurationError(GcadPreviewError):
    """Raised when configuration values are invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="INVALID_CONFIGURATION", message=message, details=details)


__all__ = [
    "GcadPreviewError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConfigurationError",
]
