"""Capability checks deciding which document the preview tracks."""

from typing import Any, Optional

from gcad_preview.config import DEFAULT_LANGUAGE_ID
from gcad_preview.host.interface import Host, TrackedDocument


def is_gcad_document(document: Any, language_id: str = DEFAULT_LANGUAGE_ID) -> bool:
    """Return True if ``document`` declares the gcad language and exposes its text."""
    if document is None:
        return False
    if getattr(document, "language_id", None) != language_id:
        return False
    return callable(getattr(document, "get_text", None))


def current_gcad_document(
    host: Host, language_id: str = DEFAULT_LANGUAGE_ID
) -> Optional[TrackedDocument]:
    """Return the host's focused document when it is a gcad document."""
    document = host.active_document()
    if not is_gcad_document(document, language_id):
        return None
    return document
