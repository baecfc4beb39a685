"""
Change and error notification.

A Signal is a named list of callbacks. It replaces GUI-toolkit property
notification so the tracker core stays usable without an event loop: a
view layer connects its handlers, the core emits.
"""

import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Signal:
    """A named, synchronous callback list."""

    def __init__(self, name: str):
        self.name = name
        self._callbacks: List[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def disconnect(self, callback: Callable[..., Any]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self, *args: Any) -> None:
        """
        Call every connected callback with args.

        A failing callback is logged and does not prevent the others from
        running; listener errors never reach the emitter.
        """
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception:
                logger.exception(f"Listener for signal '{self.name}' failed")

    def __len__(self):
        return len(self._callbacks)

    def __repr__(self):
        return f"Signal({self.name!r}, listeners={len(self._callbacks)})"
