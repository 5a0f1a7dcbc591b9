"""Unit tests for ThrottledModeStrategy."""

import pytest

from nsapi.strategies.modes.throttled import MIN_WAIT, ThrottledModeStrategy
from nsapi.types.request import RequestCategory


@pytest.fixture
def strategy(mock_scheduler, config):
    return ThrottledModeStrategy(mock_scheduler, config)


class TestSkipConditions:
    def test_empty_queue_waits_for_wakeup(self, strategy, mock_scheduler):
        assert strategy.evaluate(100.0) is None
        mock_scheduler.dispatch.assert_not_called()

    def test_in_flight_skips(self, strategy, mock_scheduler, make_request):
        """Only one request may be in flight at a time."""
        mock_scheduler.queue.enqueue(make_request())
        mock_scheduler.state.in_flight = 1

        assert strategy.evaluate(100.0) is None
        mock_scheduler.dispatch.assert_not_called()
        assert len(mock_scheduler.queue) == 1

    def test_block_existing_skips(self, strategy, mock_scheduler, make_request):
        mock_scheduler.queue.enqueue(make_request())
        mock_scheduler.state.block_existing = True

        assert strategy.evaluate(100.0) is None
        mock_scheduler.dispatch.assert_not_called()


class TestGeneralFloor:
    def test_dispatches_when_never_dispatched(self, strategy, mock_scheduler, make_request):
        request = make_request()
        mock_scheduler.queue.enqueue(request)

        assert strategy.evaluate(100.0) is None

        mock_scheduler.dispatch.assert_called_once_with(request)
        assert mock_scheduler.queue.is_empty

    def test_holds_until_floor_elapsed(self, strategy, mock_scheduler, make_request):
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request())

        wait = strategy.evaluate(100.25)

        assert wait == pytest.approx(0.75)
        mock_scheduler.dispatch.assert_not_called()
        assert len(mock_scheduler.queue) == 1

    def test_check_is_strict(self, strategy, mock_scheduler, make_request):
        """Elapsed time equal to the delay is not enough."""
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request())

        assert strategy.evaluate(101.0) == MIN_WAIT
        mock_scheduler.dispatch.assert_not_called()

        assert strategy.evaluate(101.0 + MIN_WAIT) is None
        mock_scheduler.dispatch.assert_called_once()

    def test_general_floor_applies_to_telegrams(self, strategy, mock_scheduler, make_request):
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request(RequestCategory.RECRUITMENT_TELEGRAM))

        assert strategy.evaluate(100.5) == pytest.approx(0.5)


class TestTelegramFloors:
    @pytest.mark.parametrize(
        "category,expected_wait",
        [
            (RequestCategory.RECRUITMENT_TELEGRAM, 8.0),
            (RequestCategory.NON_RECRUITMENT_TELEGRAM, 3.0),
        ],
    )
    def test_waits_on_telegram_anchor(
        self, strategy, mock_scheduler, make_request, category, expected_wait
    ):
        mock_scheduler.state.last_telegram_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request(category))

        assert strategy.evaluate(102.0) == pytest.approx(expected_wait)
        mock_scheduler.dispatch.assert_not_called()

    def test_plain_ignores_telegram_anchor(self, strategy, mock_scheduler, make_request):
        mock_scheduler.state.last_general_dispatch = 90.0
        mock_scheduler.state.last_telegram_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request())

        assert strategy.evaluate(100.5) is None
        mock_scheduler.dispatch.assert_called_once()

    def test_largest_pending_wait_wins(self, strategy, mock_scheduler, make_request):
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.state.last_telegram_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request(RequestCategory.NON_RECRUITMENT_TELEGRAM))

        assert strategy.evaluate(100.5) == pytest.approx(4.5)

    def test_blocked_telegram_holds_later_requests(
        self, strategy, mock_scheduler, make_request
    ):
        """A telegram at the head is never skipped."""
        mock_scheduler.state.last_telegram_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request(RequestCategory.RECRUITMENT_TELEGRAM))
        mock_scheduler.queue.enqueue(make_request())

        assert strategy.evaluate(101.0) == pytest.approx(9.0)
        mock_scheduler.dispatch.assert_not_called()
        assert len(mock_scheduler.queue) == 2

    def test_telegram_delay_for(self, strategy):
        assert strategy.telegram_delay_for(RequestCategory.PLAIN) is None
        assert strategy.telegram_delay_for(RequestCategory.RECRUITMENT_TELEGRAM) == 10.0
        assert strategy.telegram_delay_for(RequestCategory.NON_RECRUITMENT_TELEGRAM) == 5.0


class TestMetrics:
    def test_deferrals_counted(self, strategy, mock_scheduler, make_request):
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request())
        strategy.evaluate(100.1)
        strategy.evaluate(100.2)

        assert strategy.get_metrics() == {"mode": "throttled", "deferrals": 2}

    def test_reads_live_config(self, strategy, mock_scheduler, config, make_request):
        """Delay changes made through the config apply on the next evaluation."""
        mock_scheduler.state.last_general_dispatch = 100.0
        mock_scheduler.queue.enqueue(make_request())
        config.api_delay = 0.1

        assert strategy.evaluate(100.5) is None
        mock_scheduler.dispatch.assert_called_once()
