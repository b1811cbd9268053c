"""Extension activation: wires the preview into a host.

This is the only module that talks to host-wide registries (commands,
revivers, document-change events). Everything it builds is released by
:meth:`ExtensionController.deactivate`.
"""

from pathlib import Path
from typing import Any, Optional, Union

from gcad_preview.config import SHOW_COMMAND, VIEW_TYPE, PreviewSettings, load_settings
from gcad_preview.host.disposables import Disposable, DisposableStore
from gcad_preview.host.interface import Host, RenderingSurface
from gcad_preview.logger import Logger, session_logger
from gcad_preview.sessions import ChangeDebouncer, SessionManager


class ExtensionController:
    """Composition root for one activation of the extension."""

    def __init__(self, host: Host, settings: PreviewSettings, logger: Logger) -> None:
        self.host = host
        self.settings = settings
        self.logger = logger
        self.manager = SessionManager(host=host, settings=settings, logger=logger)
        self.debouncer = ChangeDebouncer(
            manager=self.manager,
            host=host,
            logger=logger,
            delay_seconds=settings.debounce_seconds,
            language_id=settings.language_id,
        )
        self.subscriptions = DisposableStore(logger=logger)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> "ExtensionController":
        if self._active:
            return self
        self._active = True
        if self.subscriptions.disposed:
            self.subscriptions = DisposableStore(logger=self.logger)

        self.subscriptions.add(self.host.register_command(SHOW_COMMAND, self._show_toolpaths))

        if self.host.supports_revival:
            self.subscriptions.add(
                self.host.register_surface_reviver(VIEW_TYPE, self._revive_surface)
            )

        self.subscriptions.add(self.host.on_did_change_document(self.debouncer.on_document_changed))
        self.subscriptions.add(Disposable(self.debouncer.cancel, name="debounce-timer"))

        self.logger.info(
            "gcad preview activated",
            command=SHOW_COMMAND,
            revival=self.host.supports_revival,
            debounce_ms=self.settings.debounce_ms,
        )
        return self

    def deactivate(self) -> None:
        """Release every registration exactly once."""
        if not self._active:
            return
        self._active = False
        self.subscriptions.dispose()
        self.logger.info("gcad preview deactivated")

    def _show_toolpaths(self) -> None:
        self.manager.show_or_reveal()

    def _revive_surface(self, surface: RenderingSurface, state: Any) -> None:
        self.logger.debug("Reviving toolpath surface", state=state)
        self.manager.revive(surface, state)


def activate(
    host: Host,
    extension_root: Optional[Union[str, Path]] = None,
    settings: Optional[PreviewSettings] = None,
    logger: Optional[Logger] = None,
) -> ExtensionController:
    """Build a controller for ``host`` and activate it."""
    if settings is None:
        settings = load_settings(extension_root=extension_root)
    elif extension_root is not None:
        settings = settings.with_overrides(extension_root=extension_root)
    return ExtensionController(host, settings, logger or session_logger).activate()


def deactivate(controller: ExtensionController) -> None:
    controller.deactivate()
