# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Dispatch mode strategies for nsapi.

Available Modes:
    - THROTTLED: One request at a time under the cadence floors (default)
    - UNTHROTTLED: Drain the queue immediately with no timing checks

The base class `BaseDispatchModeStrategy` defines the interface that both
implementations follow.
"""

from typing import TYPE_CHECKING, Any

from .base import BaseDispatchModeStrategy
from .throttled import ThrottledModeStrategy
from .unthrottled import UnthrottledModeStrategy

if TYPE_CHECKING:
    from ...scheduler.config import SchedulerConfig


def create_mode_strategy(
    mode: str,
    scheduler: Any,
    config: "SchedulerConfig",
) -> BaseDispatchModeStrategy:
    """
    Factory function to create the appropriate mode strategy.

    Args:
        mode: Mode name ("throttled", "unthrottled")
        scheduler: Scheduler instance the strategy drives
        config: Scheduler configuration

    Returns:
        Appropriate mode strategy instance

    Raises:
        ValueError: If mode is unknown
    """
    mode = mode.lower()

    if mode == "throttled":
        return ThrottledModeStrategy(scheduler, config)

    elif mode == "unthrottled":
        return UnthrottledModeStrategy(scheduler, config)

    else:
        raise ValueError(f"Unknown scheduler mode: {mode}")


__all__ = [
    "BaseDispatchModeStrategy",
    "ThrottledModeStrategy",
    "UnthrottledModeStrategy",
    "create_mode_strategy",
]
