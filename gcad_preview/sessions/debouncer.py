"""Coalesces bursts of document edits into one preview update."""

import asyncio
from enum import Enum
from typing import Optional

from gcad_preview.config import DEFAULT_LANGUAGE_ID
from gcad_preview.documents import current_gcad_document
from gcad_preview.host.interface import DocumentChangeEvent, Host
from gcad_preview.logger import Logger
from gcad_preview.sessions.manager import SessionManager


class DebounceState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"


class ChangeDebouncer:
    """Schedules :meth:`SessionManager.update` after a quiet period.

    Every qualifying edit cancels the pending timer and starts a new one, so
    only the last edit of a burst triggers an update.
    """

    def __init__(
        self,
        manager: SessionManager,
        host: Host,
        logger: Logger,
        delay_seconds: float,
        language_id: str = DEFAULT_LANGUAGE_ID,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError("Debounce delay cannot be negative")
        self.manager = manager
        self.host = host
        self.logger = logger
        self.delay_seconds = delay_seconds
        self.language_id = language_id
        self._loop = loop
        self._timer: Optional[asyncio.TimerHandle] = None
        self.fired_count = 0

    @property
    def state(self) -> DebounceState:
        return DebounceState.IDLE if self._timer is None else DebounceState.SCHEDULED

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def on_document_changed(self, event: DocumentChangeEvent) -> bool:
        """
        Handle a document change notification.

        Args:
            event: Change event exposing the changed ``document``

        Returns:
            True if a timer was (re)started, False if the event was ignored
        """
        tracked = current_gcad_document(self.host, self.language_id)
        if tracked is None or tracked is not event.document:
            return False

        superseded = self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay_seconds, self._fire)
        self.logger.debug(
            "Preview update scheduled", delay_seconds=self.delay_seconds, superseded=superseded
        )
        return True

    def cancel(self) -> bool:
        """Cancel the pending timer. Returns True if one was pending."""
        timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self) -> None:
        self._timer = None
        self.fired_count += 1
        self.logger.debug("Will send update", fired_count=self.fired_count)
        self.manager.update()
