"""Shared fixtures for scheduler tests."""

import asyncio
import time

import pytest

from nsapi.scheduler.config import SchedulerConfig


class CallRecorder:
    """Builds request functions that record when they were dispatched."""

    def __init__(self):
        self.calls: list[tuple[str, float]] = []
        self.active = 0
        self.max_active = 0

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @property
    def times(self) -> list[float]:
        return [at for _, at in self.calls]

    def make(self, name, result=None, duration=0.0, error=None):
        async def request_func():
            self.calls.append((name, time.monotonic()))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            try:
                if duration:
                    await asyncio.sleep(duration)
                if error is not None:
                    raise error
                return name if result is None else result
            finally:
                self.active -= 1

        return request_func


@pytest.fixture
def recorder():
    return CallRecorder()


@pytest.fixture
def fast_config():
    """Config with no cadence floors and immediate first dispatch."""
    return SchedulerConfig(
        api_delay=0.0,
        recruit_telegram_delay=0.0,
        non_recruit_telegram_delay=0.0,
        allow_immediate_requests=True,
        test_mode=True,
    )
