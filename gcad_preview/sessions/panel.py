"""The live toolpath preview panel."""

from typing import Callable, Optional

from gcad_preview.channel import MessageChannel
from gcad_preview.config import DEFAULT_LANGUAGE_ID, PANEL_TITLE
from gcad_preview.documents import current_gcad_document
from gcad_preview.host.disposables import DisposableStore
from gcad_preview.host.interface import Host, RenderingSurface, ViewColumn
from gcad_preview.logger import Logger
from gcad_preview.rendering import PanelRenderer
from gcad_preview.security import SecurityContext
from gcad_preview.validation.messages import ErrorReport


class ToolpathPanel:
    """One preview session bound to one rendering surface.

    Instances are created by :class:`~gcad_preview.sessions.manager.SessionManager`;
    the manager's slot is the only long-lived reference to them.
    """

    title = PANEL_TITLE

    def __init__(
        self,
        surface: RenderingSurface,
        host: Host,
        renderer: PanelRenderer,
        logger: Logger,
        on_dispose: Callable[["ToolpathPanel"], None],
        language_id: str = DEFAULT_LANGUAGE_ID,
    ) -> None:
        """
        Wire the panel to its surface and render the initial markup.

        Args:
            surface: Rendering surface, exclusively owned from now on
            host: Host used for the tracked document and error notifications
            renderer: Markup renderer
            logger: Logger instance
            on_dispose: Called first during disposal to clear the owning slot
            language_id: Language identifier of tracked documents
        """
        self.surface = surface
        self.host = host
        self.renderer = renderer
        self.logger = logger
        self.language_id = language_id
        self.channel = MessageChannel(surface, logger)
        self.subscriptions = DisposableStore(logger=logger)
        self.security: Optional[SecurityContext] = None
        self._on_dispose = on_dispose
        self._disposed = False

        self.subscriptions.add(self.surface.on_did_dispose(self.dispose))
        self.subscriptions.add(self.channel.on_error_report(self._handle_error_report))

        try:
            self.render()
        except Exception:
            self.subscriptions.dispose()
            raise

    @property
    def disposed(self) -> bool:
        return self._disposed

    def reveal(self, column: Optional[ViewColumn] = None) -> None:
        self.surface.reveal(column)

    def render(self) -> SecurityContext:
        """Regenerate the surface markup with a fresh security context."""
        html, security = self.renderer.render(self.surface, self.title)
        self.surface.title = self.title
        self.surface.html = html
        self.security = security
        return security

    def update(self) -> None:
        """Send the tracked document's full text to the surface.

        Sends an empty payload when no gcad document is focused.
        """
        if self._disposed:
            return
        document = current_gcad_document(self.host, self.language_id)
        source = document.get_text() if document is not None else ""
        self.channel.send_source(source)

    def dispose(self) -> None:
        """Tear the panel down; later calls are no-ops."""
        if self._disposed:
            return
        self._disposed = True

        self._on_dispose(self)
        self.surface.dispose()
        self.subscriptions.dispose()

        self.logger.info("Toolpath panel disposed", view_type=self.surface.view_type)

    def _handle_error_report(self, report: ErrorReport) -> None:
        self.logger.warning("Preview reported an error", error=report.error)
        self.host.show_error_message(report.error)
