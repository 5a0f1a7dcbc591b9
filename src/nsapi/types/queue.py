# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Queue types for request scheduling.

This module defines the descriptor that sits in the request queue while a
call waits for dispatch, and the lifecycle states it moves through.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from .request import RequestMetadata

if TYPE_CHECKING:
    from asyncio import Future


class RequestState(Enum):
    """Lifecycle of a queued request.

    QUEUED -> DISPATCHED -> COMPLETED, or QUEUED -> CANCELLED.
    """

    QUEUED = "queued"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_TRANSITIONS: dict[RequestState, frozenset[RequestState]] = {
    RequestState.QUEUED: frozenset({RequestState.DISPATCHED, RequestState.CANCELLED}),
    RequestState.DISPATCHED: frozenset({RequestState.COMPLETED}),
    RequestState.COMPLETED: frozenset(),
    RequestState.CANCELLED: frozenset(),
}


@dataclass
class QueuedRequest:
    """
    A request waiting in the queue.

    Wraps request metadata along with the callable that performs the network
    call, an optional decode hook applied to its result, and a future that
    will be resolved exactly once when the request completes or is
    cancelled.

    Attributes:
        metadata: Request metadata for categorization and caching
        request_func: Async callable that executes the actual request
        future: Future that will be resolved with the request result
        decode: Optional callable turning the raw result into the value
            delivered to the caller (and stored in the cache)
        state: Current lifecycle state
        queue_entry_time: UTC timestamp when request was added to queue
    """

    metadata: RequestMetadata
    request_func: Callable[[], Awaitable[Any]]
    future: "Future[Any]"
    decode: Callable[[Any], Any] | None = None
    state: RequestState = RequestState.QUEUED
    queue_entry_time: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def transition(self, new_state: RequestState) -> None:
        """Move to ``new_state``, rejecting transitions that skip a state."""
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid request state transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state


__all__ = ["QueuedRequest", "RequestState"]
