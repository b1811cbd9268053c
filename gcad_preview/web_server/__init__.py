"""Browser-backed host and its web server."""

from gcad_preview.web_server.host import WebDocument, WebDocumentChangeEvent, WebHost, WebSurface
from gcad_preview.web_server.web_server import GcadPreviewWebServer

__all__ = [
    "GcadPreviewWebServer",
    "WebDocument",
    "WebDocumentChangeEvent",
    "WebHost",
    "WebSurface",
]
