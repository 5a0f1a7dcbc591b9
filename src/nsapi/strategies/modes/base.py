# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base dispatch mode strategy for nsapi.

This module defines the abstract base class that the THROTTLED and
UNTHROTTLED strategies implement. The Scheduler owns the queue and state
and runs the loop; a strategy only decides, on each evaluation, what to
dispatch and how long the loop may sleep afterwards.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ...scheduler.config import SchedulerConfig
    from ...scheduler.scheduler import Scheduler


class BaseDispatchModeStrategy(ABC):
    """
    Abstract base class for scheduler dispatch strategies.

    Attributes:
        scheduler: The Scheduler whose queue and state this strategy drives
        config: Scheduler configuration (cadence delays)

    Example:
        >>> class EveryOtherTick(BaseDispatchModeStrategy):
        ...     mode_name = "every_other"
        ...     def evaluate(self, now):
        ...         if not self.scheduler.queue.is_empty:
        ...             self.scheduler.dispatch(self.scheduler.queue.pop())
        ...         return None
    """

    mode_name: str = "base"

    def __init__(self, scheduler: "Scheduler", config: "SchedulerConfig") -> None:
        self.scheduler = scheduler
        self.config = config

    @abstractmethod
    def evaluate(self, now: float) -> float | None:
        """
        Inspect the queue and dispatch whatever may go out at ``now``.

        Must never block or await; dispatching hands the request to the
        scheduler's executor, which runs it as a separate task.

        Args:
            now: Current monotonic time in seconds

        Returns:
            Seconds until the head of the queue could first become eligible,
            or None if nothing can happen until the scheduler is woken
            (enqueue, completion, flag or mode change).
        """
        pass

    def get_metrics(self) -> dict[str, Any]:
        return {"mode": self.mode_name}


__all__ = ["BaseDispatchModeStrategy"]
