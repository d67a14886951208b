from __future__ import annotations

import signal
import threading
import time
from contextlib import contextmanager
from typing import Iterator

POLL_SECONDS = 0.05


class CancelToken:
    """Cooperative cancellation flag shared by the console and the client.

    Nothing is interrupted forcibly: an in-flight request is abandoned by its
    caller, and backoff waits return as soon as the token is set.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        # Set from the SIGINT handler, which must not take the event's lock.
        self._interrupted = False
        self._waiting = False

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._interrupted or self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if cancelled meanwhile."""
        deadline = time.monotonic() + seconds
        self._waiting = True
        try:
            while not self.cancelled:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._event.wait(min(remaining, POLL_SECONDS))
            return True
        finally:
            self._waiting = False

    def interrupt(self, signum: int, frame: object) -> None:
        """SIGINT handler: mark the token cancelled.

        Inside a backoff wait the wait simply returns. Anywhere else the call in
        flight is abandoned with ``KeyboardInterrupt``.
        """
        self._interrupted = True
        if not self._waiting:
            raise KeyboardInterrupt


@contextmanager
def interrupt_cancels(token: CancelToken) -> Iterator[CancelToken]:
    """Route SIGINT to ``token`` for the duration of the block.

    Signal handlers can only be installed from the main thread; elsewhere the
    block runs with the existing handler.
    """
    if threading.current_thread() is not threading.main_thread():
        yield token
        return
    previous = signal.signal(signal.SIGINT, token.interrupt)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
