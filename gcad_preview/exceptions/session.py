"""Session and rendering-surface exceptions."""

from typing import Optional, Dict, Any

from gcad_preview.exceptions.base import GcadPreviewError


class SessionError(GcadPreviewError):
    """Base exception for preview session errors."""

    pass


class SurfaceConstructionError(SessionError):
    """Raised when the host cannot allocate a rendering surface."""

    def __init__(self, view_type: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="SURFACE_CONSTRUCTION_FAILED",
            message=f"Cannot create rendering surface '{view_type}': {reason}",
            details=details or {},
        )
        self.view_type = view_type


class SurfaceDisposedError(SessionError):
    """Raised when a message is posted to a surface that has been torn down."""

    def __init__(self, view_type: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="SURFACE_DISPOSED",
            message=f"Rendering surface '{view_type}' has been disposed",
            details=details or {},
        )
        self.view_type = view_type
