"""Cooperative cancellation for long-running reads and writes."""

import threading
from typing import Optional

from .errors import OperationCancelled


class CancellationToken:
    """
    Thread-safe cancel flag checked by the tokenizer and writer.

    Usage:
        token = CancellationToken()
        for record in read(path, cancel_token=token):
            ...
        # from another thread or a signal handler:
        token.cancel()
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation was cancelled.")


def check(token: Optional[CancellationToken]) -> None:
    """Raise OperationCancelled if token is set. A None token never cancels."""
    if token is not None:
        token.raise_if_cancelled()
