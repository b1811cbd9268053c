"""Live toolpath preview for gcad documents."""

__version__ = "0.1.0"
