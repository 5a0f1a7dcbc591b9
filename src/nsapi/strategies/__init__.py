# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Dispatch strategies used by the Scheduler."""

from .modes import (
    BaseDispatchModeStrategy,
    ThrottledModeStrategy,
    UnthrottledModeStrategy,
    create_mode_strategy,
)

__all__ = [
    "BaseDispatchModeStrategy",
    "ThrottledModeStrategy",
    "UnthrottledModeStrategy",
    "create_mode_strategy",
]
