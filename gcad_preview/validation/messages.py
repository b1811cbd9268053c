"""Wire models for the host <-> surface message channel."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


class SourcePayload(BaseModel):
    """Full text of the tracked document, sent host -> surface.

    On the wire this is the bare string, not an object.
    """

    model_config = ConfigDict(frozen=True)

    source: str = ""

    def to_wire(self) -> str:
        return self.source


class ErrorReport(BaseModel):
    """Human-readable preview/compile error, sent surface -> host."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    error: str


def parse_surface_message(raw: Any) -> Optional[ErrorReport]:
    """Decode an inbound surface message.

    Returns an :class:`ErrorReport` for objects carrying a string ``error``
    field and ``None`` for every other shape.
    """
    if not isinstance(raw, dict) or "error" not in raw:
        return None
    try:
        return ErrorReport.model_validate(raw)
    except ValidationError:
        return None
