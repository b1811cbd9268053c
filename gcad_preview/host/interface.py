"""Narrow interfaces the preview core expects from its host.

The core never imports a concrete host. Anything satisfying these protocols
(a browser-backed web host, an editor bridge, a test double) can drive it.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from gcad_preview.host.disposables import Disposable


class ViewColumn(int, Enum):
    """Where a rendering surface is placed relative to the editor."""

    ACTIVE = -1
    BESIDE = -2
    ONE = 1
    TWO = 2
    THREE = 3


class SurfaceOptions(BaseModel):
    """Sandbox options applied to a rendering surface."""

    model_config = ConfigDict(extra="ignore")

    enable_scripts: bool = True
    local_resource_roots: List[Path] = Field(default_factory=list)


def surface_options() -> SurfaceOptions:
    """Options for the toolpath surface.

    Local resources are allowed from the filesystem root (the drive root on
    Windows) so the preview module can load assets next to the document.
    """
    if os.name == "nt":
        root = Path(Path.cwd().anchor)
    else:
        root = Path("/")
    return SurfaceOptions(enable_scripts=True, local_resource_roots=[root])


@runtime_checkable
class TrackedDocument(Protocol):
    """Anything exposing a language identifier and its full text."""

    @property
    def language_id(self) -> str: ...

    def get_text(self) -> str: ...


class DocumentChangeEvent(Protocol):
    document: Any


MessageListener = Callable[[Any], None]
DisposeListener = Callable[[], None]


class RenderingSurface(Protocol):
    """Opaque sandboxed display target owned by one preview session."""

    view_type: str
    title: str
    html: str
    options: SurfaceOptions

    @property
    def csp_source(self) -> str: ...

    def as_surface_uri(self, local_path: Path) -> str: ...

    def reveal(self, column: Optional[ViewColumn] = None, preserve_focus: bool = False) -> None: ...

    def post_message(self, message: Any) -> None: ...

    def on_did_receive_message(self, listener: MessageListener) -> Disposable: ...

    def on_did_dispose(self, listener: DisposeListener) -> Disposable: ...

    def dispose(self) -> None: ...


SurfaceReviver = Callable[[RenderingSurface, Any], Union[None, Awaitable[None]]]


class Host(Protocol):
    """The process hosting the extension: commands, events, surfaces."""

    @property
    def supports_revival(self) -> bool: ...

    def active_document(self) -> Optional[TrackedDocument]: ...

    def create_surface(
        self,
        view_type: str,
        title: str,
        column: ViewColumn,
        preserve_focus: bool,
        options: SurfaceOptions,
    ) -> RenderingSurface: ...

    def show_error_message(self, message: str) -> None: ...

    def register_command(self, command_id: str, handler: Callable[[], Any]) -> Disposable: ...

    def register_surface_reviver(self, view_type: str, reviver: SurfaceReviver) -> Disposable: ...

    def on_did_change_document(
        self, listener: Callable[[DocumentChangeEvent], None]
    ) -> Disposable: ...
