# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler for serializing requests against the API's cadence limits.

This module provides:
- SchedulerConfig / CacheConfig: Configuration for scheduler and cache
- SchedulerState: Per-instance dispatch timestamps and flags
- RequestQueue: Strict FIFO queue of pending requests
- ResponseCache: Time-bounded, copy-isolated response cache
- Scheduler: The dispatch loop and executor
"""

from .cache import MISS, CacheEntry, CacheMetrics, ResponseCache
from .config import (
    MIN_API_DELAY,
    MIN_NON_RECRUIT_TELEGRAM_DELAY,
    MIN_RECRUIT_TELEGRAM_DELAY,
    CacheConfig,
    SchedulerConfig,
    SchedulerMode,
    validate_cache_validity,
    validate_delay,
)
from .queue import RequestQueue
from .scheduler import Scheduler, create_scheduler
from .state import SchedulerState

__all__ = [
    # Config
    "MIN_API_DELAY",
    "MIN_NON_RECRUIT_TELEGRAM_DELAY",
    "MIN_RECRUIT_TELEGRAM_DELAY",
    # Cache
    "MISS",
    "CacheConfig",
    "CacheEntry",
    "CacheMetrics",
    # Queue
    "RequestQueue",
    "ResponseCache",
    # Scheduler
    "Scheduler",
    "SchedulerConfig",
    "SchedulerMode",
    # State
    "SchedulerState",
    "create_scheduler",
    "validate_cache_validity",
    "validate_delay",
]
