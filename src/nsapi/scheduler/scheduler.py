# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request scheduler for nsapi.

The Scheduler serializes every call to the remote API through one FIFO
queue, enforces the cadence floors through its mode strategy, executes
dispatched requests as separate tasks and short-circuits repeated
cacheable requests through the response cache.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from typing_extensions import Self

from ..exceptions import ClientShutdownError, RequestBlockedError
from ..observability.collector import MetricsCollector, get_metrics_collector
from ..observability.constants import (
    QUEUE_DEPTH,
    REQUESTS_BLOCKED_TOTAL,
    REQUESTS_CANCELLED_TOTAL,
    REQUESTS_COMPLETED_TOTAL,
    REQUESTS_DISPATCHED_TOTAL,
    REQUESTS_FAILED_TOTAL,
    REQUESTS_SCHEDULED_TOTAL,
)
from ..strategies.modes import BaseDispatchModeStrategy, create_mode_strategy
from ..types.queue import QueuedRequest, RequestState
from ..types.request import RequestMetadata
from .cache import MISS, ResponseCache
from .config import (
    MIN_API_DELAY,
    MIN_NON_RECRUIT_TELEGRAM_DELAY,
    MIN_RECRUIT_TELEGRAM_DELAY,
    CacheConfig,
    SchedulerConfig,
    SchedulerMode,
    validate_delay,
)
from .queue import RequestQueue
from .state import SchedulerState

logger = logging.getLogger(__name__)

# Local counter names, mirrored to the nsapi_ Prometheus metrics
METRIC_REQUESTS_SCHEDULED = "requests_scheduled"
METRIC_REQUESTS_DISPATCHED = "requests_dispatched"
METRIC_REQUESTS_COMPLETED = "requests_completed"
METRIC_REQUESTS_FAILED = "requests_failed"
METRIC_REQUESTS_CANCELLED = "requests_cancelled"
METRIC_REQUESTS_BLOCKED = "requests_blocked"
METRIC_CACHE_SHORT_CIRCUITS = "cache_short_circuits"
METRIC_SCHEDULER_LOOPS = "scheduler_loops"

_PROMETHEUS_NAMES = {
    METRIC_REQUESTS_SCHEDULED: REQUESTS_SCHEDULED_TOTAL,
    METRIC_REQUESTS_DISPATCHED: REQUESTS_DISPATCHED_TOTAL,
    METRIC_REQUESTS_COMPLETED: REQUESTS_COMPLETED_TOTAL,
    METRIC_REQUESTS_FAILED: REQUESTS_FAILED_TOTAL,
    METRIC_REQUESTS_CANCELLED: REQUESTS_CANCELLED_TOTAL,
    METRIC_REQUESTS_BLOCKED: REQUESTS_BLOCKED_TOTAL,
}


class Scheduler:
    """
    The request scheduler.

    The Scheduler is responsible for:
    - Accepting submissions synchronously and handing back a future.
    - Answering fresh cacheable requests from the ResponseCache.
    - Running a single event-driven dispatch loop whose decisions are
      delegated to the current mode strategy.
    - Executing dispatched requests, updating the cadence anchors on
      completion and resolving each request's future exactly once.
    - Block flags, queue clearing, mode switching and shutdown.

    All queue, state and cache mutations happen on the event loop thread,
    either from submit()/setters or from the loop and executor tasks.

    Example:
        >>> scheduler = Scheduler(SchedulerConfig(test_mode=True, api_delay=0.0))
        >>> async with scheduler:
        ...     result = await scheduler.submit(RequestMetadata(), fetch)
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        cache_config: CacheConfig | None = None,
        cache: ResponseCache | None = None,
        metrics_enabled: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the Scheduler.

        Args:
            config: Scheduler configuration (defaults to the API's floors)
            cache_config: Response cache configuration, used if ``cache`` is
                not given
            cache: Optional pre-built ResponseCache
            metrics_enabled: Whether to enable metrics collection
            clock: Monotonic clock used for cadence and cache timestamps
        """
        self.config = config or SchedulerConfig()
        self._clock = clock

        # Setup metrics
        self._setup_metrics(metrics_enabled)

        # Setup state, queue and cache
        self.state = SchedulerState(
            block_existing=self.config.block_existing,
            block_new=self.config.block_new,
        )
        self.state.start_anchors(self._clock(), self.config.allow_immediate_requests)
        self.queue = RequestQueue(self.state)
        self.cache = cache or ResponseCache(
            cache_config, metrics_collector=self.metrics_collector, clock=clock
        )

        # Setup mode strategy
        self.mode_strategy = self._create_mode_strategy(self.config.mode)

        # Setup execution control
        self._setup_execution_control()

        logger.info(
            f"Initialized {self.__class__.__name__} with mode={self.config.mode.value}"
        )

    def _create_mode_strategy(self, mode: SchedulerMode) -> BaseDispatchModeStrategy:
        return create_mode_strategy(mode=mode.value, scheduler=self, config=self.config)

    def _setup_execution_control(self) -> None:
        """Setup the dispatch loop and task tracking."""
        self._wakeup_event = asyncio.Event()
        self._loop_task: asyncio.Task[None] | None = None
        self._active_tasks: set[asyncio.Task[None]] = set()
        self._loop_iterations = 0

    def _setup_metrics(self, metrics_enabled: bool) -> None:
        """Setup metrics collection if enabled."""
        self.metrics_enabled = metrics_enabled or self.config.metrics_enabled
        self.metrics: dict[str, int] = {
            METRIC_REQUESTS_SCHEDULED: 0,
            METRIC_REQUESTS_DISPATCHED: 0,
            METRIC_REQUESTS_COMPLETED: 0,
            METRIC_REQUESTS_FAILED: 0,
            METRIC_REQUESTS_CANCELLED: 0,
            METRIC_REQUESTS_BLOCKED: 0,
            METRIC_CACHE_SHORT_CIRCUITS: 0,
        }
        self.metrics_collector: MetricsCollector | None = (
            get_metrics_collector() if self.metrics_enabled else None
        )

    def _record(self, metric_name: str, metadata: RequestMetadata | None, value: int = 1) -> None:
        """Update the local counters and, if enabled, the metrics collector."""
        self.metrics[metric_name] = self.metrics.get(metric_name, 0) + value

        prom_name = _PROMETHEUS_NAMES.get(metric_name)
        if self.metrics_collector and prom_name:
            labels = {"category": metadata.category.value} if metadata else None
            self.metrics_collector.inc_counter(prom_name, value=value, labels=labels)

    def _update_queue_depth(self) -> None:
        if self.metrics_collector:
            self.metrics_collector.set_gauge(QUEUE_DEPTH, len(self.queue))

    # === Lifecycle ===

    async def start(self) -> None:
        """Start the dispatch loop."""
        self._ensure_loop()

    def _ensure_loop(self) -> None:
        if self.state.shutdown:
            raise ClientShutdownError("Scheduler has been shut down")
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.get_running_loop().create_task(
                self._dispatch_loop(),
                name=f"nsapi_dispatch_{id(self)}",
            )
            logger.debug(f"Dispatch loop started ({self.mode_strategy.mode_name})")

    def shutdown(self) -> int:
        """
        Shut the scheduler down permanently.

        Every queued request is failed with a cancellation error and the
        dispatch loop is stopped. Requests already dispatched run to
        completion. Further submissions raise ClientShutdownError.
        Calling shutdown() again is a no-op.

        Returns:
            Number of queued requests that were cancelled
        """
        if self.state.shutdown:
            return 0

        self.state.shutdown = True
        cancelled = self._cancel_queued("Client shut down")

        if self._loop_task is not None and not self._loop_task.done():
            self._loop_task.cancel()

        logger.info(
            f"{self.__class__.__name__} shut down ({cancelled} queued request(s) cancelled)"
        )
        return cancelled

    async def stop(self) -> None:
        """Shut down and wait for the loop and any in-flight request to finish."""
        self.shutdown()

        if self._loop_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._loop_task
            self._loop_task = None

        if self._active_tasks:
            await asyncio.gather(*self._active_tasks, return_exceptions=True)
        self._active_tasks.clear()

    def is_running(self) -> bool:
        """Check if the dispatch loop is running."""
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def is_shutdown(self) -> bool:
        return self.state.shutdown

    async def __aenter__(self) -> Self:
        """
        Async context manager entry.

        Starts the dispatch loop and returns self.
        """
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit. Always shuts the scheduler down."""
        await self.stop()

    # === Submission ===

    def submit(
        self,
        metadata: RequestMetadata,
        request_func: Callable[[], Awaitable[Any]],
        decode: Callable[[Any], Any] | None = None,
    ) -> "asyncio.Future[Any]":
        """
        Submit a request for dispatch.

        Rejections happen synchronously, before the request touches the
        queue. A fresh cache entry resolves the returned future immediately
        without consuming a dispatch.

        Must be called from a coroutine running on the event loop.

        Args:
            metadata: Request metadata (category and optional fingerprint)
            request_func: Async callable performing the network call
            decode: Optional callable applied to the raw result before it is
                cached and delivered

        Returns:
            Future resolved with the (decoded) result or the failure

        Raises:
            ClientShutdownError: If the scheduler has been shut down
            RequestBlockedError: If new requests are blocked
        """
        if self.state.shutdown:
            raise ClientShutdownError("Scheduler has been shut down")
        if self.state.block_new:
            self._record(METRIC_REQUESTS_BLOCKED, metadata)
            raise RequestBlockedError("New requests are blocked")

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        if metadata.fingerprint is not None:
            cached = self.cache.lookup(metadata.fingerprint)
            if cached is not MISS:
                self._record(METRIC_CACHE_SHORT_CIRCUITS, metadata)
                future.set_result(cached)
                return future

        queued_request = QueuedRequest(
            metadata=metadata,
            request_func=request_func,
            future=future,
            decode=decode,
        )
        self.queue.enqueue(queued_request)
        future.add_done_callback(
            lambda f, req=queued_request: self._on_future_done(req, f)
        )

        self._record(METRIC_REQUESTS_SCHEDULED, metadata)
        self._update_queue_depth()
        logger.debug(
            f"Queued {metadata.category.value} request {metadata.request_id} "
            f"(queue depth {len(self.queue)})"
        )

        self._ensure_loop()
        self._wake()
        return future

    async def submit_request(
        self,
        metadata: RequestMetadata,
        request_func: Callable[[], Awaitable[Any]],
        decode: Callable[[Any], Any] | None = None,
    ) -> Any:
        """Submit a request and wait for its result."""
        return await self.submit(metadata, request_func, decode)

    def _on_future_done(self, request: QueuedRequest, future: "asyncio.Future[Any]") -> None:
        # A caller that stops waiting (task cancelled) must not leave its
        # request in the queue.
        if future.cancelled() and request.state is RequestState.QUEUED:
            if self.queue.remove(request):
                logger.debug(f"Dropped abandoned request {request.metadata.request_id}")
                self._update_queue_depth()
                self._wake()

    # === Dispatch loop ===

    def _wake(self) -> None:
        self._wakeup_event.set()

    async def _dispatch_loop(self) -> None:
        """
        Main dispatch loop.

        Evaluates the queue through the mode strategy, then sleeps until it
        is woken (enqueue, completion, flag or mode change) or until the
        strategy's computed wait elapses.
        """
        while not self.state.shutdown:
            try:
                self._loop_iterations += 1
                wait = self.mode_strategy.evaluate(self._clock())
                await self._wait_for_wakeup(wait)
            except asyncio.CancelledError:
                logger.debug("Dispatch loop cancelled")
                raise
            except (AttributeError, ValueError, RuntimeError, TypeError) as e:
                logger.exception(f"Dispatch loop error: {e}")
                await asyncio.sleep(0.01)

    async def _wait_for_wakeup(self, timeout: float | None) -> None:
        if timeout is None:
            await self._wakeup_event.wait()
        else:
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._wakeup_event.wait(), timeout=timeout)
        self._wakeup_event.clear()

    # === Executor ===

    def dispatch(self, request: QueuedRequest) -> None:
        """
        Hand a popped request to the executor.

        Called by the mode strategy. Starts the network call as its own task
        and returns immediately.
        """
        request.transition(RequestState.DISPATCHED)
        self.state.in_flight += 1
        self._record(METRIC_REQUESTS_DISPATCHED, request.metadata)
        self._update_queue_depth()
        logger.debug(
            f"Dispatching {request.metadata.category.value} request "
            f"{request.metadata.request_id} {request.metadata.path or ''}"
        )

        task = asyncio.get_running_loop().create_task(self._execute(request))
        self._active_tasks.add(task)
        task.add_done_callback(self._active_tasks.discard)

    async def _execute(self, request: QueuedRequest) -> None:
        metadata = request.metadata
        try:
            result = await request.request_func()
            if request.decode is not None:
                result = request.decode(result)
        except asyncio.CancelledError:
            self._complete(request)
            if not request.future.done():
                request.future.cancel()
            raise
        except Exception as e:
            self._complete(request)
            self._record(METRIC_REQUESTS_FAILED, metadata)
            logger.debug(f"Request {metadata.request_id} failed: {e!r}")
            if not request.future.done():
                request.future.set_exception(e)
            return

        self._complete(request)
        self._record(METRIC_REQUESTS_COMPLETED, metadata)
        if metadata.fingerprint is not None:
            self.cache.store(metadata.fingerprint, result)
        if not request.future.done():
            request.future.set_result(result)

    def _complete(self, request: QueuedRequest) -> None:
        """Record completion: anchors, in-flight count, lifecycle state."""
        request.transition(RequestState.COMPLETED)
        self.state.record_completion(request.metadata.category, self._clock())
        self.state.in_flight -= 1
        self._wake()

    # === Queue control ===

    def _cancel_queued(self, reason: str) -> int:
        pending = self.queue.snapshot()
        cancelled = self.queue.cancel_all(reason)
        for queued in pending:
            self._record(METRIC_REQUESTS_CANCELLED, queued.metadata)
        self._update_queue_depth()
        return cancelled

    def cancel_all(self) -> int:
        """
        Fail every queued (not yet dispatched) request.

        In-flight requests are not affected. Safe to call on an empty queue.

        Returns:
            Number of requests cancelled
        """
        cancelled = self._cancel_queued("Request queue cleared")
        self._wake()
        return cancelled

    # === Runtime settings ===

    @property
    def mode(self) -> SchedulerMode:
        return self.config.mode

    def set_mode(self, mode: SchedulerMode | str) -> None:
        """
        Switch between throttled and unthrottled dispatch.

        The running loop is torn down and a new one is installed with the
        new strategy; queued requests are kept in order.
        """
        mode = SchedulerMode(mode)
        if mode is self.config.mode:
            return

        self.config.mode = mode
        self.mode_strategy = self._create_mode_strategy(mode)

        if self._loop_task is not None and not self._loop_task.done():
            self._loop_task.cancel()
            self._loop_task = None
            self._ensure_loop()
        self._wake()
        logger.info(f"Scheduler mode switched to {mode.value}")

    @property
    def api_delay(self) -> float:
        return self.config.api_delay

    @api_delay.setter
    def api_delay(self, value: float) -> None:
        self.config.api_delay = validate_delay(
            "api_delay", value, MIN_API_DELAY, self.config.test_mode
        )
        self._wake()

    @property
    def recruit_telegram_delay(self) -> float:
        return self.config.recruit_telegram_delay

    @recruit_telegram_delay.setter
    def recruit_telegram_delay(self, value: float) -> None:
        self.config.recruit_telegram_delay = validate_delay(
            "recruit_telegram_delay",
            value,
            MIN_RECRUIT_TELEGRAM_DELAY,
            self.config.test_mode,
        )
        self._wake()

    @property
    def non_recruit_telegram_delay(self) -> float:
        return self.config.non_recruit_telegram_delay

    @non_recruit_telegram_delay.setter
    def non_recruit_telegram_delay(self, value: float) -> None:
        self.config.non_recruit_telegram_delay = validate_delay(
            "non_recruit_telegram_delay",
            value,
            MIN_NON_RECRUIT_TELEGRAM_DELAY,
            self.config.test_mode,
        )
        self._wake()

    @property
    def block_existing(self) -> bool:
        return self.state.block_existing

    @block_existing.setter
    def block_existing(self, value: bool) -> None:
        self.state.block_existing = bool(value)
        self._wake()

    @property
    def block_new(self) -> bool:
        return self.state.block_new

    @block_new.setter
    def block_new(self, value: bool) -> None:
        self.state.block_new = bool(value)

    # === Metrics ===

    def get_metrics(self) -> dict[str, Any]:
        """
        Get current scheduler metrics.

        Combines scheduler state, local counters, the mode strategy's and
        the cache's metrics, and the collector's flat metrics if enabled.
        """
        metrics: dict[str, Any] = {
            "scheduler_type": self.__class__.__name__,
            "running": self.is_running(),
            "shutdown": self.state.shutdown,
            "queue_depth": len(self.queue),
            "dispatch_in_flight": self.state.dispatch_in_flight,
            "in_flight": self.state.in_flight,
            "active_tasks": len(self._active_tasks),
            "block_existing": self.state.block_existing,
            "block_new": self.state.block_new,
            METRIC_SCHEDULER_LOOPS: self._loop_iterations,
        }
        metrics.update(self.metrics)
        metrics.update(self.mode_strategy.get_metrics())
        metrics.update(self.cache.get_metrics())
        metrics["scheduler_mode"] = self.config.mode.value

        if self.metrics_collector:
            metrics["collector_metrics"] = self.metrics_collector.get_flat_metrics()

        return metrics


def create_scheduler(
    mode: str | None = None,
    config: SchedulerConfig | None = None,
    cache_config: CacheConfig | None = None,
    **kwargs: Any,
) -> Scheduler:
    """
    Factory function to create a Scheduler.

    Args:
        mode: Scheduler mode ("throttled", "unthrottled"). If None, uses
            config.mode (or "throttled" if config is also None)
        config: Optional scheduler config (a default one is created if omitted)
        cache_config: Optional cache config
        **kwargs: Additional arguments passed to the Scheduler constructor

    Raises:
        ValueError: If mode is unknown
    """
    if config is None:
        config = SchedulerConfig()

    if mode is not None:
        try:
            config.mode = SchedulerMode(mode.lower())
        except ValueError as e:
            raise ValueError(f"Unknown scheduler mode: {mode}") from e

    return Scheduler(config=config, cache_config=cache_config, **kwargs)


__all__ = ["Scheduler", "create_scheduler"]
