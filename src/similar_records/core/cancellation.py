"""Call-scoped cancellation tokens."""

import threading
from typing import Callable, List, Optional

from .exceptions import RankingCancelledError


class CancellationToken:
    """
    Thread-safe cancellation signal checked by ranking workers.

    Tokens handed in by callers are never passed to workers directly.
    Each call derives its own child with ``CancellationToken.linked(parent)``:
    cancelling the parent cancels the child, never the other way round.
    Used as a context manager, a derived token detaches from its parent on
    exit so the parent keeps no reference to finished calls.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self._detach: Optional[Callable[[], None]] = None
        self.reason: Optional[str] = None
        self.error_type = RankingCancelledError

    @classmethod
    def linked(cls, parent: Optional["CancellationToken"] = None) -> "CancellationToken":
        """Create a fresh token that follows ``parent`` when one is given."""
        token = cls()
        if parent is not None:
            token._attach_to(parent)
        return token

    def derive(self) -> "CancellationToken":
        """Create a child token that follows this one."""
        return CancellationToken.linked(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(
        self,
        reason: Optional[str] = None,
        error_type: type = RankingCancelledError
    ) -> None:
        """
        Fire the token and every token derived from it.

        Args:
            reason: Message carried by the raised error
            error_type: Exception class raised by ``raise_if_cancelled``
        """
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self.error_type = error_type
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def raise_if_cancelled(self) -> None:
        """Raise the cancellation error if the token has fired."""
        if self._event.is_set():
            raise self.error_type(self.reason or "Ranking was cancelled")

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run ``callback`` once when the token fires.

        Runs immediately if the token already fired.

        Returns:
            Function removing the callback again
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)

        callback()
        return lambda: None

    def detach(self) -> None:
        """Stop following the parent token."""
        if self._detach is not None:
            self._detach()
            self._detach = None

    def _attach_to(self, parent: "CancellationToken") -> None:
        self._detach = parent.add_callback(
            lambda: self.cancel(parent.reason, parent.error_type)
        )

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def __enter__(self) -> "CancellationToken":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()
