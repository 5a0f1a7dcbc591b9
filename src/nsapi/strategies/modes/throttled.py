# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Throttled mode dispatch strategy for nsapi.

Dispatches one request at a time, and only once every cadence floor that
applies to the head of the queue has elapsed:

1. The general floor (``api_delay``) applies to every request.
2. Recruitment telegrams also wait ``recruit_telegram_delay`` since the
   last telegram of either kind.
3. Non-recruitment telegrams also wait ``non_recruit_telegram_delay``
   since the last telegram of either kind.

The head is never skipped: a telegram waiting on its cooldown holds back
every request queued behind it, which keeps delivery in submission order.
"""

import logging
from typing import Any

from ...types.request import RequestCategory
from .base import BaseDispatchModeStrategy

logger = logging.getLogger(__name__)

# Smallest sleep the loop takes while a constraint is pending. The checks are
# strict (elapsed must exceed the delay), so a computed wait of exactly zero
# still needs one more evaluation.
MIN_WAIT = 0.001


class ThrottledModeStrategy(BaseDispatchModeStrategy):
    """
    THROTTLED mode strategy: strict one-at-a-time dispatch under cadence floors.

    Instead of re-checking on every tick, evaluate() returns the exact time
    until the head could first be dispatched so the scheduler loop can sleep
    until then (or until it is woken earlier).
    """

    mode_name = "throttled"

    def __init__(self, scheduler: Any, config: Any) -> None:
        super().__init__(scheduler, config)
        self._deferrals = 0

    def telegram_delay_for(self, category: RequestCategory) -> float | None:
        """Cadence floor measured from the last telegram, if any applies."""
        if category is RequestCategory.RECRUITMENT_TELEGRAM:
            return float(self.config.recruit_telegram_delay)
        if category is RequestCategory.NON_RECRUITMENT_TELEGRAM:
            return float(self.config.non_recruit_telegram_delay)
        return None

    def time_until_eligible(self, category: RequestCategory, now: float) -> float:
        """
        Seconds until a request of ``category`` may be dispatched.

        Returns 0.0 if it may be dispatched right now.
        """
        state = self.scheduler.state
        wait = 0.0

        since_general = state.since_general(now)
        if not since_general > self.config.api_delay:
            wait = max(wait, self.config.api_delay - since_general, MIN_WAIT)

        telegram_delay = self.telegram_delay_for(category)
        if telegram_delay is not None:
            since_telegram = state.since_telegram(now)
            if not since_telegram > telegram_delay:
                wait = max(wait, telegram_delay - since_telegram, MIN_WAIT)

        return wait

    def evaluate(self, now: float) -> float | None:
        state = self.scheduler.state
        queue = self.scheduler.queue

        if state.dispatch_in_flight or queue.is_empty or state.block_existing:
            return None

        head = queue.peek()
        wait = self.time_until_eligible(head.metadata.category, now)
        if wait > 0:
            self._deferrals += 1
            logger.debug(
                f"Holding {head.metadata.category.value} request "
                f"{head.metadata.request_id} for {wait:.3f}s"
            )
            return wait

        self.scheduler.dispatch(queue.pop())
        return None

    def get_metrics(self) -> dict[str, Any]:
        return {
            "mode": self.mode_name,
            "deferrals": self._deferrals,
        }


__all__ = ["MIN_WAIT", "ThrottledModeStrategy"]
