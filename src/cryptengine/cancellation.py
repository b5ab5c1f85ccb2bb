"""Cooperative cancellation for long running searches."""

import threading

from cryptengine.errors import SearchCancelled


class CancellationToken:
    """
    Flag shared between a search and the scheduler that may preempt it.

    Search loops call check() once per iteration; after cancel() has been
    called the next check() raises SearchCancelled.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self):
        if self._event.is_set():
            raise SearchCancelled("search cancelled")


def ensure_token(token: CancellationToken|None) -> CancellationToken:
    """Return the given token, or a fresh one that is never cancelled."""
    return token if token is not None else CancellationToken()
