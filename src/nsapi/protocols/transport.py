# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the network transport used by the request executor."""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from ..types.response import RawResponse


@runtime_checkable
class TransportProtocol(Protocol):
    """
    Minimal protocol for performing one API call.

    The scheduler never touches the network itself. The facade binds a
    transport call into each request's zero-argument action, so anything
    that can turn a query string and headers into a RawResponse can be
    plugged in (a real HTTP client, or a fake in tests).
    """

    @property
    def base_url(self) -> str:
        """Base URL of the API (for logging/debugging)."""
        ...

    async def fetch(
        self,
        query: str,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """
        Perform a GET request for an already-encoded query string.

        Raises:
            ApiError: On connection failure or a non-success status code
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
