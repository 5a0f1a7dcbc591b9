# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Core data types shared across the scheduler and the API facade."""

from .queue import QueuedRequest, RequestState
from .request import RequestCategory, RequestMetadata, TelegramType
from .response import RawResponse, ResponseMetadata

__all__ = [
    "QueuedRequest",
    "RawResponse",
    "RequestCategory",
    "RequestMetadata",
    "RequestState",
    "ResponseMetadata",
    "TelegramType",
]
