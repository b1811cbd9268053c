"""Abstract logger interface.

Implementations receive a human-readable message plus arbitrary keyword
context. The context is structured data and must not be formatted into the
message by callers.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Drop-in logger interface used by every gcad-preview component."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        pass
