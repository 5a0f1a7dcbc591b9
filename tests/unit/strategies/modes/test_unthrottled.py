"""Unit tests for UnthrottledModeStrategy and the strategy factory."""

from unittest.mock import call

import pytest

from nsapi.strategies.modes import (
    ThrottledModeStrategy,
    UnthrottledModeStrategy,
    create_mode_strategy,
)
from nsapi.types.request import RequestCategory


@pytest.fixture
def strategy(mock_scheduler, config):
    return UnthrottledModeStrategy(mock_scheduler, config)


class TestUnthrottled:
    def test_drains_queue_in_order(self, strategy, mock_scheduler, make_request):
        requests = [
            make_request(),
            make_request(RequestCategory.RECRUITMENT_TELEGRAM),
            make_request(),
        ]
        for request in requests:
            mock_scheduler.queue.enqueue(request)
        # Timing and in-flight state are ignored
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.state.in_flight = 1

        assert strategy.evaluate(100.0) is None

        assert mock_scheduler.dispatch.call_args_list == [call(r) for r in requests]
        assert mock_scheduler.queue.is_empty

    def test_block_existing_respected(self, strategy, mock_scheduler, make_request):
        mock_scheduler.queue.enqueue(make_request())
        mock_scheduler.state.block_existing = True

        assert strategy.evaluate(0.0) is None
        mock_scheduler.dispatch.assert_not_called()

    def test_metrics(self, strategy):
        assert strategy.get_metrics() == {"mode": "unthrottled"}


class TestFactory:
    @pytest.mark.parametrize(
        "mode,cls",
        [
            ("throttled", ThrottledModeStrategy),
            ("THROTTLED", ThrottledModeStrategy),
            ("unthrottled", UnthrottledModeStrategy),
        ],
    )
    def test_creates_strategy(self, mock_scheduler, config, mode, cls):
        strategy = create_mode_strategy(mode, mock_scheduler, config)
        assert isinstance(strategy, cls)
        assert strategy.scheduler is mock_scheduler
        assert strategy.config is config

    def test_unknown_mode(self, mock_scheduler, config):
        with pytest.raises(ValueError, match="Unknown scheduler mode"):
            create_mode_strategy("intelligent", mock_scheduler, config)
