"""FIFO queue of deferred replay actions for unauthorized requests.

When a request is rejected with ``401`` the client enqueues a zero-argument
closure that replays it.  Once credentials are refreshed,
:meth:`RetryQueue.drain_all` runs every stalled replay, oldest first.

The queue is a list plus a head index, so both ends are O(1).  Consumed
slots are released in bulk once the list holds more than
:data:`MIN_COMPACT_SIZE` slots and more than :data:`COMPACT_RATIO` of them
are consumed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Action = Callable[[], None]

MIN_COMPACT_SIZE = 50
COMPACT_RATIO = 0.25


class RetryQueue:
    """Thread-safe FIFO of replay actions.

    Example::

        queue = RetryQueue()
        queue.enqueue(lambda: print("replay 1"))
        queue.enqueue(lambda: print("replay 2"))
        queue.drain_all()  # prints "replay 1" then "replay 2"
    """

    def __init__(self) -> None:
        self._buffer: list[Optional[Action]] = []
        self._head = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self.count

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._buffer) - self._head

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def buffer_size(self) -> int:
        """Number of slots in the backing list, consumed ones included."""
        with self._lock:
            return len(self._buffer)

    @property
    def front(self) -> Optional[Action]:
        """The next action to be dequeued, without removing it."""
        with self._lock:
            if self._head >= len(self._buffer):
                return None
            return self._buffer[self._head]

    def enqueue(self, action: Action) -> None:
        with self._lock:
            self._buffer.append(action)

    def dequeue(self) -> Optional[Action]:
        """Remove and return the oldest action, or ``None`` if the queue is empty."""
        with self._lock:
            if self._head >= len(self._buffer):
                return None
            action = self._buffer[self._head]
            self._buffer[self._head] = None
            self._head += 1
            self._compact()
            return action

    def drain_all(self) -> int:
        """Dequeue and run every action queued when the drain starts.

        Actions enqueued while draining (a replay rejected again) stay queued
        for the next drain.  Actions run outside the lock, in enqueue order;
        one that raises is logged and the drain moves on to the next.

        Returns:
            The number of actions run.
        """
        pending = self.count
        ran = 0
        for _ in range(pending):
            action = self.dequeue()
            if action is None:
                break
            ran += 1
            try:
                action()
            except Exception:
                logger.exception("Retry queue action raised")
        return ran

    def discard(self, actions: Iterable[Action]) -> int:
        """Drop the given queued actions (matched by identity) without running them.

        Returns:
            How many were dropped.
        """
        targets = {id(action) for action in actions}
        with self._lock:
            pending = self._buffer[self._head :]
            kept = [action for action in pending if id(action) not in targets]
            self._buffer = kept
            self._head = 0
            return len(pending) - len(kept)

    def clear(self) -> int:
        """Drop every queued action without running it. Returns how many were dropped."""
        with self._lock:
            dropped = len(self._buffer) - self._head
            self._buffer = []
            self._head = 0
            return dropped

    def _compact(self) -> None:
        size = len(self._buffer)
        if size > MIN_COMPACT_SIZE and self._head / size > COMPACT_RATIO:
            del self._buffer[: self._head]
            self._head = 0
