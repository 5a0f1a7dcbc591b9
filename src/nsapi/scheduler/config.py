# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler Configuration for nsapi

This module provides configuration classes for the request scheduler and
the response cache, together with the validation helpers the runtime
setters share with them.
"""

from dataclasses import dataclass
from enum import Enum

from ..exceptions import ConfigurationError

# Cadence floors the remote API enforces, in seconds
MIN_API_DELAY = 0.6
MIN_RECRUIT_TELEGRAM_DELAY = 180.0
MIN_NON_RECRUIT_TELEGRAM_DELAY = 60.0


class SchedulerMode(Enum):
    """Scheduling mode that determines dispatch behavior.

    - THROTTLED: Requests are dispatched one at a time and only once every
      applicable cadence floor has elapsed. Use against the real API.
    - UNTHROTTLED: Requests are dispatched as soon as they reach the head
      of the queue with no timing checks and no serialization. Use only
      when rate limiting has been disabled deliberately, e.g. against a
      mock server.
    """

    THROTTLED = "throttled"
    UNTHROTTLED = "unthrottled"


def validate_delay(name: str, value: float, floor: float, test_mode: bool = False) -> float:
    """
    Validate a cadence delay.

    Args:
        name: Setting name used in the error message
        value: Delay in seconds
        floor: Minimum allowed delay in seconds
        test_mode: If True only require a non-negative value

    Returns:
        The delay as a float

    Raises:
        ConfigurationError: If the delay is below the floor
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number of seconds")
    minimum = 0.0 if test_mode else floor
    if value < minimum:
        raise ConfigurationError(
            f"{name} must be greater than or equal to {minimum} seconds"
        )
    return float(value)


def validate_cache_validity(value: float | None) -> float | None:
    """
    Validate a cache validity window.

    ``None`` means entries never expire. Any number must be strictly
    positive.

    Raises:
        ConfigurationError: If the value is zero, negative or not a number
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError("cache_validity must be a number of seconds or None")
    if value <= 0:
        raise ConfigurationError("cache_validity must be positive")
    return float(value)


@dataclass
class SchedulerConfig:
    """
    Configuration for the request scheduler.

    All durations are in seconds.
    """

    # === Core Scheduling Configuration ===

    mode: SchedulerMode = SchedulerMode.THROTTLED
    """Scheduler operation mode."""

    api_delay: float = MIN_API_DELAY
    """Minimum time between the completion of one request and the next dispatch."""

    recruit_telegram_delay: float = MIN_RECRUIT_TELEGRAM_DELAY
    """Minimum time since the last telegram before a recruitment telegram."""

    non_recruit_telegram_delay: float = MIN_NON_RECRUIT_TELEGRAM_DELAY
    """Minimum time since the last telegram before a non-recruitment telegram."""

    allow_immediate_requests: bool = False
    """Allow the first request to go out immediately after construction.

    When False the scheduler behaves as if a request of every category had
    just completed at construction time, so the first dispatch waits for a
    full cadence interval.
    """

    # === Blocking ===

    block_existing: bool = False
    """Hold queued requests in the queue instead of dispatching them."""

    block_new: bool = False
    """Reject new submissions."""

    # === Metrics and Monitoring ===

    metrics_enabled: bool = False
    """Enable metrics collection."""

    # === Testing Support ===

    test_mode: bool = False
    """Relax the cadence floors to "non-negative" for tests against a mock."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.mode, SchedulerMode):
            try:
                self.mode = SchedulerMode(self.mode)
            except ValueError as e:
                raise ConfigurationError(f"Unknown scheduler mode: {self.mode}") from e
        self.api_delay = validate_delay(
            "api_delay", self.api_delay, MIN_API_DELAY, self.test_mode
        )
        self.recruit_telegram_delay = validate_delay(
            "recruit_telegram_delay",
            self.recruit_telegram_delay,
            MIN_RECRUIT_TELEGRAM_DELAY,
            self.test_mode,
        )
        self.non_recruit_telegram_delay = validate_delay(
            "non_recruit_telegram_delay",
            self.non_recruit_telegram_delay,
            MIN_NON_RECRUIT_TELEGRAM_DELAY,
            self.test_mode,
        )


@dataclass
class CacheConfig:
    """
    Configuration for the response cache.
    """

    enabled: bool = True
    """Serve repeated identical requests from the cache."""

    validity: float | None = 900.0
    """Seconds a cached response stays fresh. None means never expire."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.validity = validate_cache_validity(self.validity)


__all__ = [
    "MIN_API_DELAY",
    "MIN_NON_RECRUIT_TELEGRAM_DELAY",
    "MIN_RECRUIT_TELEGRAM_DELAY",
    "CacheConfig",
    "SchedulerConfig",
    "SchedulerMode",
    "validate_cache_validity",
    "validate_delay",
]
