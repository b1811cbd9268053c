"""Preview session package."""
from gcad_preview.sessions.panel import ToolpathPanel
from gcad_preview.sessions.manager import SessionManager
from gcad_preview.sessions.debouncer import ChangeDebouncer, DebounceState

__all__ = ["ToolpathPanel", "SessionManager", "ChangeDebouncer", "DebounceState"]
