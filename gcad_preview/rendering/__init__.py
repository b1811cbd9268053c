"""Surface markup rendering."""

from gcad_preview.rendering.engine import PanelRenderer

__all__ = ["PanelRenderer"]
