"""Console logger backed by the standard ``logging`` module."""

import logging
import sys
from typing import Any, Optional

from gcad_preview.logger.interface import Logger

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConsoleLogger(Logger):
    """Logger writing ``message key=value ...`` lines to stderr.

    Keyword context is appended to the message in insertion order so log
    lines stay grep-friendly without a structured sink.
    """

    def __init__(
        self,
        name: str = "gcad_preview",
        level: int = logging.INFO,
        stream: Optional[Any] = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        # Handlers are shared per logger name; only attach one.
        if not any(getattr(h, "_gcad_console", False) for h in self._logger.handlers):
            handler = logging.StreamHandler(stream or sys.stderr)
            handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            handler._gcad_console = True  # type: ignore[attr-defined]
            self._logger.addHandler(handler)
        self._logger.propagate = False

    @property
    def name(self) -> str:
        return self._logger.name

    def set_level(self, level: int) -> None:
        self._logger.setLevel(level)

    def _format(self, message: str, kwargs: dict) -> str:
        if not kwargs:
            return message
        context = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
        return f"{message} {context}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format(message, kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(self._format(message, kwargs))
