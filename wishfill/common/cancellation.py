"""
Cooperative Cancellation

A token shared between the caller and one extraction run. The caller
cancels it at its deadline; the run checks it between steps and any
in-flight response registered on it is closed so the socket is released
instead of finishing in the background.
"""

import logging
import threading
from typing import Callable, List

from ..errors import ExtractionCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Thread-safe cancellation flag with close callbacks.

    Usage:
        token = CancellationToken()
        token.register(response.close)
        ...
        token.raise_if_cancelled()
    """

    def __init__(self):
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Flag the token and run every registered callback once."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            self._run(callback)

    def register(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancel; immediately if already cancelled."""
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        self._run(callback)

    def unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise ExtractionCancelled()

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            # Closing an already-broken connection may raise; cancel must not
            logger.debug("Cancellation callback failed: %s", e)
