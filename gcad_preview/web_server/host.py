"""Browser-backed host for the toolpath preview.

The editor side talks to :class:`WebHost` over HTTP (focus, change and
command requests); the rendering surface is a browser page that loads the
panel markup and then opens a WebSocket as its message channel.
"""

import asyncio
import contextlib
import inspect
import json
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional

from fastapi import WebSocket, WebSocketDisconnect

from gcad_preview.exceptions import (
    CommandNotFoundError,
    RegistrationError,
    ResourceNotFoundError,
    SurfaceConstructionError,
    SurfaceDisposedError,
    ValidationError,
)
from gcad_preview.host.disposables import Disposable
from gcad_preview.host.interface import SurfaceOptions, SurfaceReviver, ViewColumn
from gcad_preview.logger import Logger


class WebDocument:
    """Editor document mirrored on the host."""

    def __init__(self, uri: str, language_id: str, text: str = ""):
        self.uri = uri
        self.language_id = language_id
        self._text = text
        self.version = 1

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        self.version += 1


@dataclass
class WebDocumentChangeEvent:
    document: WebDocument


class WebSurface:
    """Rendering surface living in a browser tab.

    Messages posted before the page connects are queued and delivered in
    order once the WebSocket is up.
    """

    def __init__(
        self,
        host: "WebHost",
        view_type: str,
        title: str,
        options: SurfaceOptions,
        column: ViewColumn,
        logger: Logger,
    ):
        self.host = host
        self.view_type = view_type
        self.title = title
        self.options = options
        self.column = column
        self.html = ""
        self.reveal_count = 0
        self.logger = logger
        self._outbox: Deque[Any] = deque()
        self._wakeup = asyncio.Event()
        self._message_listeners: List[Callable[[Any], None]] = []
        self._dispose_listeners: List[Callable[[], None]] = []
        self._websocket: Optional[WebSocket] = None
        self._disposed = False

    @property
    def csp_source(self) -> str:
        return self.host.origin

    @property
    def connected(self) -> bool:
        return self._websocket is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def pending_messages(self) -> int:
        return len(self._outbox)

    def as_surface_uri(self, local_path: Path) -> str:
        return self.host.asset_uri(local_path)

    def reveal(self, column: Optional[ViewColumn] = None, preserve_focus: bool = False) -> None:
        if column is not None:
            self.column = column
        self.reveal_count += 1

    def post_message(self, message: Any) -> None:
        if self._disposed:
            raise SurfaceDisposedError(self.view_type)
        self._outbox.append(message)
        self._wakeup.set()

    def on_did_receive_message(self, listener: Callable[[Any], None]) -> Disposable:
        self._message_listeners.append(listener)
        return Disposable(
            lambda: self._discard(self._message_listeners, listener), name="surface-message"
        )

    def on_did_dispose(self, listener: Callable[[], None]) -> Disposable:
        self._dispose_listeners.append(listener)
        return Disposable(
            lambda: self._discard(self._dispose_listeners, listener), name="surface-dispose"
        )

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._outbox.clear()
        self._wakeup.set()
        self.host._surface_closed(self)
        for listener in list(self._dispose_listeners):
            listener()
        self._dispose_listeners.clear()
        self._message_listeners.clear()

    async def serve(self, websocket: WebSocket) -> None:
        """Run the channel for one connected page until either side closes it."""
        self._websocket = websocket
        sender: Optional[asyncio.Task] = None
        try:
            await websocket.accept()
            sender = asyncio.create_task(self._drain(websocket))
            self.logger.info("Surface connected", view_type=self.view_type)
            while not self._disposed:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(code=message.get("code", 1000))
                raw = message.get("text")
                if raw is None:
                    self.logger.debug("Dropping binary surface message", view_type=self.view_type)
                    continue
                self._deliver(raw)
        except WebSocketDisconnect as exc:
            self.logger.info("Surface disconnected", view_type=self.view_type, code=exc.code)
        finally:
            if sender is not None:
                sender.cancel()
                with contextlib.suppress(asyncio.CancelledError, Exception):
                    await sender
            self._websocket = None
            self.dispose()

    async def _drain(self, websocket: WebSocket) -> None:
        while True:
            while self._outbox:
                await websocket.send_json(self._outbox.popleft())
            if self._disposed:
                await websocket.close()
                return
            self._wakeup.clear()
            await self._wakeup.wait()

    def _deliver(self, raw: str) -> None:
        try:
            message = json.loads(raw)
        except ValueError:
            self.logger.debug("Dropping non-JSON surface message", view_type=self.view_type)
            return
        for listener in list(self._message_listeners):
            listener(message)

    @staticmethod
    def _discard(listeners: list, listener: Callable) -> None:
        if listener in listeners:
            listeners.remove(listener)


class WebHost:
    """Host implementation serving one browser surface at a time."""

    def __init__(
        self,
        origin: str,
        extension_root: Path,
        logger: Logger,
        supports_revival: bool = True,
    ):
        """
        Initialize the web host.

        Args:
            origin: Origin the browser loads the surface from, e.g. ``http://127.0.0.1:8020``
            extension_root: Directory served under ``/assets``
            logger: Logger instance
            supports_revival: Whether surfaces may be revived after a page reload
        """
        self.origin = origin.rstrip("/")
        self.extension_root = Path(extension_root).resolve()
        self.logger = logger
        self.notifications: List[str] = []
        self._supports_revival = supports_revival
        self._documents: Dict[str, WebDocument] = {}
        self._active_uri: Optional[str] = None
        self._commands: Dict[str, Callable[[], Any]] = {}
        self._revivers: Dict[str, SurfaceReviver] = {}
        self._change_listeners: List[Callable[[WebDocumentChangeEvent], None]] = []
        self._surface: Optional[WebSurface] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Host protocol
    # ------------------------------------------------------------------

    @property
    def supports_revival(self) -> bool:
        return self._supports_revival

    def active_document(self) -> Optional[WebDocument]:
        if self._active_uri is None:
            return None
        return self._documents.get(self._active_uri)

    def create_surface(
        self,
        view_type: str,
        title: str,
        column: ViewColumn,
        preserve_focus: bool,
        options: SurfaceOptions,
    ) -> WebSurface:
        if self._closed:
            raise SurfaceConstructionError(view_type, "host is shut down")
        if self._surface is not None:
            raise SurfaceConstructionError(view_type, "a surface is already open")
        self._surface = WebSurface(self, view_type, title, options, column, self.logger)
        self.logger.debug("Surface created", view_type=view_type, column=column.name)
        return self._surface

    def show_error_message(self, message: str) -> None:
        self.notifications.append(message)
        self.logger.error("Preview error", message=message)

    def register_command(self, command_id: str, handler: Callable[[], Any]) -> Disposable:
        if command_id in self._commands:
            raise RegistrationError("Command", command_id)
        self._commands[command_id] = handler
        return Disposable(lambda: self._commands.pop(command_id, None), name=command_id)

    def register_surface_reviver(self, view_type: str, reviver: SurfaceReviver) -> Disposable:
        if view_type in self._revivers:
            raise RegistrationError("Surface reviver", view_type)
        self._revivers[view_type] = reviver
        return Disposable(lambda: self._revivers.pop(view_type, None), name=f"reviver:{view_type}")

    def on_did_change_document(
        self, listener: Callable[[WebDocumentChangeEvent], None]
    ) -> Disposable:
        self._change_listeners.append(listener)
        return Disposable(
            lambda: WebSurface._discard(self._change_listeners, listener), name="document-change"
        )

    # ------------------------------------------------------------------
    # Editor-facing operations
    # ------------------------------------------------------------------

    @property
    def surface(self) -> Optional[WebSurface]:
        return self._surface

    def focus_document(self, uri: str, language_id: str, text: str = "") -> WebDocument:
        document = self._documents.get(uri)
        if document is None:
            document = WebDocument(uri, language_id, text)
            self._documents[uri] = document
        else:
            document.language_id = language_id
            if text != document.get_text():
                document.set_text(text)
        self._active_uri = uri
        return document

    def change_document(self, uri: str, text: str) -> Optional[WebDocument]:
        document = self._documents.get(uri)
        if document is None:
            return None
        document.set_text(text)
        event = WebDocumentChangeEvent(document=document)
        for listener in list(self._change_listeners):
            listener(event)
        return document

    async def execute_command(self, command_id: str) -> None:
        handler = self._commands.get(command_id)
        if handler is None:
            raise CommandNotFoundError(command_id)
        result = handler()
        if inspect.isawaitable(result):
            await result

    def has_reviver(self, view_type: str) -> bool:
        return self._supports_revival and view_type in self._revivers

    async def revive_surface(self, view_type: str, state: Any = None) -> WebSurface:
        """Create a surface and hand it to the registered reviver."""
        reviver = self._revivers.get(view_type)
        if reviver is None:
            raise ResourceNotFoundError(
                code="REVIVER_NOT_FOUND",
                message=f"No surface reviver registered for '{view_type}'",
            )
        surface = self.create_surface(
            view_type=view_type,
            title="",
            column=ViewColumn.ONE,
            preserve_focus=True,
            options=SurfaceOptions(),
        )
        result = reviver(surface, state)
        if inspect.isawaitable(result):
            await result
        return surface

    def asset_uri(self, local_path: Path) -> str:
        resolved = Path(local_path).resolve()
        try:
            relative = resolved.relative_to(self.extension_root)
        except ValueError:
            raise ValidationError(
                code="ASSET_OUTSIDE_ROOT",
                message=f"Asset '{resolved}' is outside the extension root",
                details={"extension_root": str(self.extension_root)},
            )
        return f"{self.origin}/assets/{relative.as_posix()}"

    def resolve_asset(self, relative: str) -> Optional[Path]:
        candidate = (self.extension_root / relative).resolve()
        try:
            candidate.relative_to(self.extension_root)
        except ValueError:
            return None
        return candidate if candidate.is_file() else None

    def close(self) -> None:
        self._closed = True
        if self._surface is not None:
            self._surface.dispose()

    def _surface_closed(self, surface: WebSurface) -> None:
        if self._surface is surface:
            self._surface = None
