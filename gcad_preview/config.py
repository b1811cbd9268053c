"""Centralized configuration and defaults for the gcad toolpath preview.

This module provides a comprehensive overview of all configuration options
and their environment variable mappings.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from gcad_preview.exceptions import ConfigurationError
from gcad_preview.logger import Logger, session_logger

# =============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# =============================================================================

# Preview behaviour
# -----------------
# GCAD_PREVIEW_DEBOUNCE_MS: Quiet period after the last edit before the
#   preview is refreshed (default: 2000)
# GCAD_PREVIEW_LANGUAGE_ID: Language identifier of tracked documents
#   (default: gcad)
#
# Assets
# ------
# GCAD_PREVIEW_EXTENSION_ROOT: Directory containing dist/app.js and
#   dist/app.css (default: current working directory)
#
# Web host
# --------
# GCAD_PREVIEW_WEB_HOST: Bind address (default: 127.0.0.1)
# GCAD_PREVIEW_WEB_PORT: Port (default: 8020)
#
# Development
# -----------
# GCAD_PREVIEW_LOG_LEVEL: Logging verbosity (default: INFO)
#   Values: DEBUG, INFO, WARNING, ERROR, CRITICAL

# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================

DEFAULT_DEBOUNCE_MS = 2000
DEFAULT_LANGUAGE_ID = "gcad"
DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 8020
DEFAULT_LOG_LEVEL = "INFO"

VIEW_TYPE = "toolpath"
PANEL_TITLE = "Toolpaths"
SHOW_COMMAND = "gcad.showToolpaths"

SCRIPT_ARTIFACT = ("dist", "app.js")
STYLE_ARTIFACT = ("dist", "app.css")
CANVAS_ID = "toolpath-canvas"

NONCE_LENGTH = 32
NONCE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

ENV_PREFIX = "GCAD_PREVIEW"


def _parse_positive_int_env(
    name: str, default: int, minimum: int = 1, logger: Optional[Logger] = None
) -> int:
    """Parse a positive integer from an environment variable with fallback."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        value = int(raw)
        if value < minimum:
            raise ValueError(f"must be >= {minimum}")
        return value
    except ValueError:
        (logger or session_logger).warning(
            "config.invalid_env",
            variable=name,
            provided_value=raw,
            default_value=default,
        )
        return default


@dataclass(frozen=True)
class PreviewSettings:
    """Runtime settings shared by the session, debouncer and hosts."""

    extension_root: Path
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    language_id: str = DEFAULT_LANGUAGE_ID
    web_host: str = DEFAULT_WEB_HOST
    web_port: int = DEFAULT_WEB_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ConfigurationError(
                "Debounce delay cannot be negative", details={"debounce_ms": self.debounce_ms}
            )
        if not self.language_id:
            raise ConfigurationError("Language identifier cannot be empty")
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError(
                f"Unknown log level '{self.log_level}'", details={"log_level": self.log_level}
            )
        object.__setattr__(self, "extension_root", Path(self.extension_root).resolve())

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def script_path(self) -> Path:
        return self.extension_root.joinpath(*SCRIPT_ARTIFACT)

    @property
    def style_path(self) -> Path:
        return self.extension_root.joinpath(*STYLE_ARTIFACT)

    def with_overrides(self, **overrides) -> "PreviewSettings":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_settings(logger: Optional[Logger] = None, **overrides) -> PreviewSettings:
    """Build settings from the environment, then apply explicit overrides.

    Malformed environment values fall back to defaults with a warning;
    malformed explicit overrides raise :class:`ConfigurationError`.
    """
    settings = PreviewSettings(
        extension_root=Path(os.environ.get(f"{ENV_PREFIX}_EXTENSION_ROOT") or Path.cwd()),
        debounce_ms=_parse_positive_int_env(
            f"{ENV_PREFIX}_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS, minimum=0, logger=logger
        ),
        language_id=os.environ.get(f"{ENV_PREFIX}_LANGUAGE_ID") or DEFAULT_LANGUAGE_ID,
        web_host=os.environ.get(f"{ENV_PREFIX}_WEB_HOST") or DEFAULT_WEB_HOST,
        web_port=_parse_positive_int_env(
            f"{ENV_PREFIX}_WEB_PORT", DEFAULT_WEB_PORT, logger=logger
        ),
        log_level=(os.environ.get(f"{ENV_PREFIX}_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
    return settings.with_overrides(**overrides)


def get_config_summary(settings: PreviewSettings) -> dict:
    """Get a summary of the effective configuration.

    Returns:
        Dictionary with current configuration values
    """
    return {
        "extension_root": str(settings.extension_root),
        "debounce_ms": settings.debounce_ms,
        "language_id": settings.language_id,
        "web_host": settings.web_host,
        "web_port": settings.web_port,
        "log_level": settings.log_level,
        "script_artifact": str(settings.script_path),
        "style_artifact": str(settings.style_path),
    }
