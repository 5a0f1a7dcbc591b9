"""
Shared fixtures for benchmark tests.
"""

import pytest_asyncio

from nsapi.scheduler.config import CacheConfig, SchedulerConfig, SchedulerMode
from nsapi.scheduler.scheduler import Scheduler


def _config(mode: SchedulerMode) -> SchedulerConfig:
    # Zero delays so only the scheduling machinery is measured
    return SchedulerConfig(
        mode=mode,
        api_delay=0.0,
        recruit_telegram_delay=0.0,
        non_recruit_telegram_delay=0.0,
        allow_immediate_requests=True,
        test_mode=True,
    )


@pytest_asyncio.fixture
async def throttled_scheduler():
    """Throttled scheduler with every cadence floor at zero."""
    scheduler = Scheduler(
        config=_config(SchedulerMode.THROTTLED),
        cache_config=CacheConfig(enabled=False),
    )
    await scheduler.start()
    yield scheduler
    await scheduler.stop()


@pytest_asyncio.fixture
async def unthrottled_scheduler():
    """Unthrottled scheduler."""
    scheduler = Scheduler(
        config=_config(SchedulerMode.UNTHROTTLED),
        cache_config=CacheConfig(enabled=False),
    )
    await scheduler.start()
    yield scheduler
    await scheduler.stop()


@pytest_asyncio.fixture
async def caching_scheduler():
    """Throttled scheduler with a warm-able cache."""
    scheduler = Scheduler(
        config=_config(SchedulerMode.THROTTLED),
        cache_config=CacheConfig(enabled=True, validity=None),
    )
    await scheduler.start()
    yield scheduler
    await scheduler.stop()
