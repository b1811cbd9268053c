"""Session manager owning the single toolpath preview panel."""

from typing import Any, Optional

from gcad_preview.config import PANEL_TITLE, VIEW_TYPE, PreviewSettings
from gcad_preview.host.interface import Host, RenderingSurface, ViewColumn, surface_options
from gcad_preview.logger import Logger
from gcad_preview.rendering import PanelRenderer
from gcad_preview.sessions.panel import ToolpathPanel


class SessionManager:
    """Holds the slot for the one live :class:`ToolpathPanel`.

    The slot is owned here and nowhere else. Every mutation goes through
    :meth:`show_or_reveal`, :meth:`revive` or the panel's own disposal.
    """

    def __init__(
        self,
        host: Host,
        settings: PreviewSettings,
        logger: Logger,
        renderer: Optional[PanelRenderer] = None,
    ) -> None:
        """
        Initialize the session manager.

        Args:
            host: Host providing surfaces, documents and notifications
            settings: Preview settings
            logger: Logger instance
            renderer: Markup renderer (built from settings if None)
        """
        self.host = host
        self.settings = settings
        self.logger = logger
        self.renderer = renderer or PanelRenderer(settings=settings, logger=logger)
        self._current: Optional[ToolpathPanel] = None

    @property
    def current(self) -> Optional[ToolpathPanel]:
        return self._current

    def show_or_reveal(self) -> ToolpathPanel:
        """
        Reveal the live panel, creating it first if none exists.

        Returns:
            The live panel

        Raises:
            SurfaceConstructionError: If the host cannot create a surface
        """
        column = ViewColumn.BESIDE if self.host.active_document() is not None else ViewColumn.ONE

        if self._current is not None:
            self._current.reveal(column)
            self.logger.debug("Revealed existing toolpath panel", column=column.name)
            return self._current

        surface = self.host.create_surface(
            view_type=VIEW_TYPE,
            title=PANEL_TITLE,
            column=column,
            preserve_focus=True,
            options=surface_options(),
        )
        self._current = self._adopt(surface)
        self.logger.info("Created toolpath panel", column=column.name)
        return self._current

    def revive(self, surface: RenderingSurface, state: Any = None) -> ToolpathPanel:
        """
        Rebuild the panel around a surface restored by the host.

        Args:
            surface: Surface handed back by the host after a restart or reload
            state: Opaque persisted state; only its presence matters

        Returns:
            The revived panel
        """
        stale = self._current
        if stale is not None and not stale.disposed:
            self.logger.warning("Replacing live toolpath panel during revival")
            stale.dispose()

        surface.options = surface_options()
        self._current = self._adopt(surface)
        self.logger.info("Revived toolpath panel", has_state=state is not None)
        return self._current

    def render(self) -> None:
        """Re-render the live panel's markup, if any."""
        if self._current is not None:
            self._current.render()

    def update(self) -> None:
        """Push the tracked document to the live panel, if any."""
        if self._current is not None:
            self._current.update()

    def dispose(self) -> None:
        """Dispose the live panel, if any."""
        if self._current is not None:
            self._current.dispose()

    def _adopt(self, surface: RenderingSurface) -> ToolpathPanel:
        try:
            return self._create_panel(surface)
        except Exception as e:
            self.logger.error(
                "Toolpath panel construction failed", error=str(e), error_type=type(e).__name__
            )
            surface.dispose()
            raise

    def _create_panel(self, surface: RenderingSurface) -> ToolpathPanel:
        return ToolpathPanel(
            surface=surface,
            host=self.host,
            renderer=self.renderer,
            logger=self.logger,
            on_dispose=self._release,
            language_id=self.settings.language_id,
        )

    def _release(self, panel: ToolpathPanel) -> None:
        if self._current is panel:
            self._current = None
