# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""nsapi - Rate-limited asyncio client for the NationStates API.

This library serializes every call to the NationStates API through one
scheduler that honors the API's rate limits, and answers repeated shard
requests from a time-bounded cache.

Key Features:
    - Strict FIFO dispatch under the general, recruitment telegram and
      non-recruitment telegram cadence floors
    - Event-driven dispatch loop (no busy polling)
    - Copy-isolated response cache with a configurable validity window
    - Block flags, queue clearing and irreversible shutdown
    - XML responses decoded into plain dicts, lists and scalars
    - Private shards and commands with automatic PIN reuse
    - Optional Prometheus metrics

Quick Start:
    >>> from nsapi import NsApi
    >>>
    >>> async with NsApi("Testlandia") as api:
    ...     data = await api.nation_request("testlandia", ["name", "region"])

Main Exports:
    - NsApi, Auth, WorldAssemblyCouncil, TelegramType: Public API
    - Scheduler, create_scheduler: Core scheduling components
    - SchedulerConfig, CacheConfig: Configuration options
    - ResponseCache: The response cache
    - HttpxTransport, XmlDecoder: Default transport and decoder

Version: 1.0.0
"""

from .api import (
    API_VERSION,
    VERSION,
    Auth,
    NsApi,
    WorldAssemblyCouncil,
)
from .decoding import XmlDecoder
from .exceptions import (
    ApiError,
    ClientShutdownError,
    ConfigurationError,
    DecodeError,
    NsApiError,
    RequestBlockedError,
    RequestCancelledError,
)
from .protocols import DecoderProtocol, TransportProtocol
from .scheduler import (
    CacheConfig,
    ResponseCache,
    Scheduler,
    SchedulerConfig,
    SchedulerMode,
    create_scheduler,
)
from .transport import HttpxTransport
from .types import (
    RawResponse,
    RequestCategory,
    RequestMetadata,
    ResponseMetadata,
    TelegramType,
)

__version__ = VERSION

__all__ = [
    "API_VERSION",
    "ApiError",
    "Auth",
    "CacheConfig",
    "ClientShutdownError",
    "ConfigurationError",
    "DecodeError",
    "DecoderProtocol",
    "HttpxTransport",
    "NsApi",
    "NsApiError",
    "RawResponse",
    "RequestBlockedError",
    "RequestCancelledError",
    "RequestCategory",
    "RequestMetadata",
    "ResponseCache",
    "ResponseMetadata",
    "Scheduler",
    "SchedulerConfig",
    "SchedulerMode",
    "TelegramType",
    "TransportProtocol",
    "WorldAssemblyCouncil",
    "XmlDecoder",
    "__version__",
    "create_scheduler",
]
