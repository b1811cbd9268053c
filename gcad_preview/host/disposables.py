"""Cancelable registrations and the stores that own them."""

from typing import Callable, List, Optional

from gcad_preview.logger import Logger


class Disposable:
    """A registration released by calling :meth:`dispose`.

    The release callback runs at most once; later calls are no-ops.
    """

    def __init__(self, on_dispose: Optional[Callable[[], None]] = None, name: str = ""):
        self._on_dispose = on_dispose
        self.name = name
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        callback, self._on_dispose = self._on_dispose, None
        if callback is not None:
            callback()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "live"
        return f"Disposable({self.name or 'anonymous'}, {state})"


class DisposableStore:
    """Owns a set of registrations and releases each of them exactly once.

    Registrations are released in reverse order of addition. Adding to a
    store that has already been disposed releases the newcomer immediately.
    """

    def __init__(self, logger: Optional[Logger] = None):
        self._items: List[Disposable] = []
        self._disposed = False
        self.logger = logger

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: Disposable) -> Disposable:
        if self._disposed:
            item.dispose()
            return item
        self._items.append(item)
        return item

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        while self._items:
            item = self._items.pop()
            if item.disposed:
                continue
            item.dispose()
            if self.logger:
                self.logger.debug("Registration released", registration=item.name)
