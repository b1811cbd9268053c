"""Host abstraction: protocols the preview core depends on."""

from gcad_preview.host.disposables import Disposable, DisposableStore
from gcad_preview.host.interface import (
    DocumentChangeEvent,
    Host,
    RenderingSurface,
    SurfaceOptions,
    SurfaceReviver,
    TrackedDocument,
    ViewColumn,
    surface_options,
)

__all__ = [
    "Disposable",
    "DisposableStore",
    "DocumentChangeEvent",
    "Host",
    "RenderingSurface",
    "SurfaceOptions",
    "SurfaceReviver",
    "TrackedDocument",
    "ViewColumn",
    "surface_options",
]
