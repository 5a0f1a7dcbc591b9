# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
FIFO request queue for the scheduler.
"""

import logging
from collections import deque

from ..exceptions import RequestBlockedError, RequestCancelledError
from ..types.queue import QueuedRequest, RequestState
from .state import SchedulerState

logger = logging.getLogger(__name__)


class RequestQueue:
    """
    Ordered collection of requests awaiting dispatch.

    Insertion order is dispatch order; nothing is ever reordered. The queue
    never holds a request whose future is already resolved: cancel_all()
    resolves futures only after removing their requests.

    The queue reads ``block_new`` from the SchedulerState it is given, so
    the flag has a single owner.
    """

    def __init__(self, state: SchedulerState) -> None:
        self._state = state
        self._items: deque[QueuedRequest] = deque()

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def enqueue(self, request: QueuedRequest) -> None:
        """
        Append a request to the tail of the queue.

        Raises:
            RequestBlockedError: If new requests are blocked. The queue is
                not touched.
        """
        if self._state.block_new:
            raise RequestBlockedError("New requests are blocked")
        self._items.append(request)

    def snapshot(self) -> list[QueuedRequest]:
        """Return the queued requests in dispatch order."""
        return list(self._items)

    def peek(self) -> QueuedRequest | None:
        """Return the head of the queue without removing it."""
        if not self._items:
            return None
        return self._items[0]

    def pop(self) -> QueuedRequest:
        """
        Remove and return the head of the queue.

        Raises:
            IndexError: If the queue is empty
        """
        return self._items.popleft()

    def remove(self, request: QueuedRequest) -> bool:
        """
        Remove a specific request, e.g. one whose caller stopped waiting.

        Returns:
            True if the request was queued and has been removed
        """
        try:
            self._items.remove(request)
        except ValueError:
            return False
        request.transition(RequestState.CANCELLED)
        return True

    def cancel_all(self, reason: str = "Request queue cleared") -> int:
        """
        Drain the queue, failing every pending request.

        Requests are removed from the tail backward. Safe to call on an empty
        queue.

        Returns:
            Number of requests cancelled
        """
        cancelled = 0
        while self._items:
            request = self._items.pop()
            request.transition(RequestState.CANCELLED)
            if not request.future.done():
                request.future.set_exception(RequestCancelledError(reason))
            cancelled += 1

        if cancelled:
            logger.debug(f"Cancelled {cancelled} queued request(s): {reason}")
        return cancelled


__all__ = ["RequestQueue"]
