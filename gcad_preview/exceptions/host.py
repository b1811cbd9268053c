"""Host registration exceptions."""

from typing import Optional, Dict, Any

from gcad_preview.exceptions.base import GcadPreviewError, ResourceNotFoundError


class RegistrationError(GcadPreviewError):
    """Raised when a command or reviver is registered twice."""

    def __init__(self, kind: str, name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="DUPLICATE_REGISTRATION",
            message=f"{kind} '{name}' is already registered",
            details=details or {},
        )
        self.kind = kind
        self.name = name


class CommandNotFoundError(ResourceNotFoundError):
    """Raised when invoking a command nobody registered."""

    def __init__(self, command_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="COMMAND_NOT_FOUND",
            message=f"Command '{command_id}' not found",
            details=details or {},
        )
        self.command_id = command_id
