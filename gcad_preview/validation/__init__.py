"""Message models and decoding."""

from gcad_preview.validation.messages import ErrorReport, SourcePayload, parse_surface_message

__all__ = ["ErrorReport", "SourcePayload", "parse_surface_message"]
