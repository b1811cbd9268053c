"""One-way message channel between a preview session and its surface.

The host only sends :class:`SourcePayload` values and only acts on
:class:`ErrorReport` values coming back. Ordering is whatever the surface's
transport provides (in send order); there is no acknowledgement and no
request/response pairing.
"""

from typing import Any, Callable, Optional

from gcad_preview.host.disposables import Disposable
from gcad_preview.host.interface import RenderingSurface
from gcad_preview.logger import Logger
from gcad_preview.validation.messages import ErrorReport, SourcePayload, parse_surface_message


class MessageChannel:
    """Encodes outbound payloads and decodes inbound error reports."""

    def __init__(self, surface: RenderingSurface, logger: Logger) -> None:
        self.surface = surface
        self.logger = logger
        self.sent_count = 0

    def send_source(self, source: str) -> None:
        """Post the full document text to the surface (fire-and-forget)."""
        payload = SourcePayload(source=source)
        self.surface.post_message(payload.to_wire())
        self.sent_count += 1
        self.logger.debug(
            "Source payload sent",
            view_type=self.surface.view_type,
            length=len(payload.source),
            sequence=self.sent_count,
        )

    def on_error_report(self, handler: Callable[[ErrorReport], None]) -> Disposable:
        """Invoke ``handler`` for every inbound error report.

        Messages of any other shape are dropped.
        """

        def _receive(raw: Any) -> None:
            report = self._decode(raw)
            if report is not None:
                handler(report)

        return self.surface.on_did_receive_message(_receive)

    def _decode(self, raw: Any) -> Optional[ErrorReport]:
        report = parse_surface_message(raw)
        if report is None:
            self.logger.debug("Ignoring surface message", kind=type(raw).__name__)
        return report
