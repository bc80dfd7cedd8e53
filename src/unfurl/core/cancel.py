"""Cancellation token shared between a session and its resolver."""

from __future__ import annotations

import threading


class CancelToken:
    """One-shot, thread-safe cancellation flag.

    A session owns exactly one token. Cancelling it makes any resolution
    still running for that session stop at its next file read.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
