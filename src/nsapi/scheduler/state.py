# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler state for nsapi.

Holds the dispatch timestamps and block flags of one Scheduler instance.
"""

from dataclasses import dataclass

from ..types.request import RequestCategory


@dataclass
class SchedulerState:
    """
    Mutable state owned by exactly one Scheduler.

    Timestamps are monotonic seconds. ``None`` means nothing has been
    dispatched yet, which satisfies every cadence constraint.

    Attributes:
        last_general_dispatch: Completion time of the most recent request
        last_telegram_dispatch: Completion time of the most recent telegram
            of either category
        in_flight: Number of dispatched requests that have not completed,
            in either mode
        block_existing: Hold queued requests instead of dispatching them
        block_new: Reject new submissions
        shutdown: Set once by shutdown(); never cleared
    """

    last_general_dispatch: float | None = None
    last_telegram_dispatch: float | None = None
    in_flight: int = 0
    block_existing: bool = False
    block_new: bool = False
    shutdown: bool = False

    @property
    def dispatch_in_flight(self) -> bool:
        return self.in_flight > 0

    def start_anchors(self, now: float, allow_immediate_requests: bool) -> None:
        """Initialize the cadence anchors at construction time."""
        if allow_immediate_requests:
            self.last_general_dispatch = None
            self.last_telegram_dispatch = None
        else:
            self.last_general_dispatch = now
            self.last_telegram_dispatch = now

    def record_completion(self, category: RequestCategory, now: float) -> None:
        """Update the anchors after a dispatched request finished."""
        self.last_general_dispatch = now
        if category.is_telegram:
            self.last_telegram_dispatch = now

    def since_general(self, now: float) -> float:
        if self.last_general_dispatch is None:
            return float("inf")
        return now - self.last_general_dispatch

    def since_telegram(self, now: float) -> float:
        if self.last_telegram_dispatch is None:
            return float("inf")
        return now - self.last_telegram_dispatch


__all__ = ["SchedulerState"]
