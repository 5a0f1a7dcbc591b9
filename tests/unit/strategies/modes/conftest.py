"""Shared fixtures for dispatch strategy tests."""

import asyncio
from unittest.mock import Mock

import pytest

from nsapi.scheduler.config import SchedulerConfig
from nsapi.scheduler.queue import RequestQueue
from nsapi.scheduler.state import SchedulerState
from nsapi.types.queue import QueuedRequest
from nsapi.types.request import RequestCategory, RequestMetadata


async def _noop():
    return None


@pytest.fixture
def event_loop_for_futures():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def config():
    return SchedulerConfig(
        api_delay=1.0,
        recruit_telegram_delay=10.0,
        non_recruit_telegram_delay=5.0,
        test_mode=True,
    )


@pytest.fixture
def mock_scheduler():
    """Scheduler stand-in with a real state and queue and a mock dispatch."""
    scheduler = Mock()
    scheduler.state = SchedulerState()
    scheduler.queue = RequestQueue(scheduler.state)
    scheduler.dispatch = Mock()
    return scheduler


@pytest.fixture
def make_request(event_loop_for_futures):
    def _make(category=RequestCategory.PLAIN):
        return QueuedRequest(
            metadata=RequestMetadata(category=category),
            request_func=_noop,
            future=event_loop_for_futures.create_future(),
        )

    return _make
