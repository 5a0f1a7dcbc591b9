# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `nsapi_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Gauges use present-tense descriptive names

Label Best Practices:
    Only the categorical `category` label (plain, recruitment_telegram,
    non_recruitment_telegram) is used. Never label by request id, nation
    name or fingerprint; those are unbounded.
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "nsapi"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Scheduling Metrics (scheduler/scheduler.py)
# =============================================================================

REQUESTS_SCHEDULED_TOTAL = f"{METRIC_PREFIX}_requests_scheduled_total"
"""Total requests placed in the queue."""

REQUESTS_DISPATCHED_TOTAL = f"{METRIC_PREFIX}_requests_dispatched_total"
"""Total requests popped from the queue and handed to the executor."""

REQUESTS_COMPLETED_TOTAL = f"{METRIC_PREFIX}_requests_completed_total"
"""Total requests completed successfully."""

REQUESTS_FAILED_TOTAL = f"{METRIC_PREFIX}_requests_failed_total"
"""Total dispatched requests that failed (transport or decode error)."""

REQUESTS_CANCELLED_TOTAL = f"{METRIC_PREFIX}_requests_cancelled_total"
"""Total queued requests cancelled by a queue clear or shutdown."""

REQUESTS_BLOCKED_TOTAL = f"{METRIC_PREFIX}_requests_blocked_total"
"""Total submissions rejected because new requests were blocked."""


# =============================================================================
# Cache Metrics (scheduler/cache.py)
# =============================================================================

CACHE_HITS_TOTAL = f"{METRIC_PREFIX}_cache_hits_total"
"""Total cache hits (fresh response found in the cache)."""

CACHE_MISSES_TOTAL = f"{METRIC_PREFIX}_cache_misses_total"
"""Total cache misses (response not found or expired)."""


# =============================================================================
# Gauges
# =============================================================================

QUEUE_DEPTH = f"{METRIC_PREFIX}_queue_depth"
"""Current queue depth (requests waiting for dispatch)."""


__all__ = [
    "CACHE_HITS_TOTAL",
    "CACHE_MISSES_TOTAL",
    "METRIC_PREFIX",
    "QUEUE_DEPTH",
    "REQUESTS_BLOCKED_TOTAL",
    "REQUESTS_CANCELLED_TOTAL",
    "REQUESTS_COMPLETED_TOTAL",
    "REQUESTS_DISPATCHED_TOTAL",
    "REQUESTS_FAILED_TOTAL",
    "REQUESTS_SCHEDULED_TOTAL",
]
