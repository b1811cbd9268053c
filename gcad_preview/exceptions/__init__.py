"""Custom exceptions for the preview session lifecycle and its hosts."""

from gcad_preview.exceptions.base import (
    GcadPreviewError,
    ValidationError,
    ResourceNotFoundError,
    ConfigurationError,
)
from gcad_preview.exceptions.session import (
    SessionError,
    SurfaceConstructionError,
    SurfaceDisposedError,
)
from gcad_preview.exceptions.host import (
    RegistrationError,
    CommandNotFoundError,
)

__all__ = [
    "GcadPreviewError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConfigurationError",
    "SessionError",
    "SurfaceConstructionError",
    "SurfaceDisposedError",
    "RegistrationError",
    "CommandNotFoundError",
]
