# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Unthrottled mode dispatch strategy for nsapi.

Drains the queue as fast as the loop runs, with no timing checks and no
one-at-a-time serialization. Only meant for callers that disabled rate
limiting on purpose, e.g. when testing against a mock server.
"""

from .base import BaseDispatchModeStrategy


class UnthrottledModeStrategy(BaseDispatchModeStrategy):
    """
    UNTHROTTLED mode strategy: dispatch every queued request immediately.

    ``block_existing`` is still honored.
    """

    mode_name = "unthrottled"

    def evaluate(self, now: float) -> float | None:
        state = self.scheduler.state
        queue = self.scheduler.queue

        while not queue.is_empty and not state.block_existing:
            self.scheduler.dispatch(queue.pop())
        return None


__all__ = ["UnthrottledModeStrategy"]
