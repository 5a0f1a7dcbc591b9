# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the nsapi library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from NsApiError, making it easy to catch
all client-related exceptions with a single except clause.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types.response import ResponseMetadata


class NsApiError(Exception):
    """Base exception for all nsapi errors.

    This is the root exception class for the nsapi library.
    Catch this exception to handle any error originating from the library.

    Example:
        try:
            data = await api.nation_request("testlandia", ["fullname"])
        except NsApiError as e:
            logger.error(f"NationStates request failed: {e}")
    """

    pass


class ConfigurationError(NsApiError, ValueError):
    """Raised when a configuration value is invalid.

    This exception is raised synchronously at the point where the value is
    set, either while constructing a SchedulerConfig, CacheConfig or NsApi,
    or through one of the runtime setters on NsApi / Scheduler.
    It is never delivered through a request future.

    Common causes include:
    - A cadence delay below the floor the remote API enforces
    - A non-positive cache validity window
    - An empty user agent

    Example:
        try:
            api.api_delay = 0.1
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
    """

    pass


class RequestBlockedError(NsApiError):
    """Raised when a request is rejected at submission time.

    New submissions are rejected while ``block_new_requests`` is set. The
    request never enters the queue and nothing is dispatched for it.

    Example:
        api.block_new_requests = True
        try:
            await api.world_request(["numnations"])
        except RequestBlockedError:
            logger.info("Requests are paused, try again later")
    """

    pass


class ClientShutdownError(RequestBlockedError):
    """Raised when a request is submitted after the client was shut down.

    Shutdown is irreversible for a given client instance; create a new
    client to continue making requests.
    """

    pass


class RequestCancelledError(NsApiError):
    """Raised through a request's future when it is drained from the queue.

    Only requests that were still queued (not yet dispatched) are cancelled,
    either by an explicit ``clear_queue()`` or during shutdown. In-flight
    requests are allowed to finish.
    """

    pass


class ApiError(NsApiError):
    """Raised when the network call itself fails.

    This covers connection failures as well as non-success HTTP status
    codes. The core never retries automatically; retry policy is left to
    the caller.

    Attributes:
        response_metadata: Status code and headers of the response, when
            a response was received. None for connection-level failures.

    Example:
        try:
            await api.nation_request("no such nation", ["name"])
        except ApiError as e:
            if e.response_metadata and e.response_metadata.status_code == 404:
                logger.warning("Nation does not exist")
    """

    def __init__(
        self,
        message: str,
        response_metadata: "ResponseMetadata | None" = None,
    ):
        super().__init__(message)
        self.response_metadata = response_metadata

    @property
    def status_code(self) -> int | None:
        """HTTP status code of the failed response, if any."""
        if self.response_metadata is None:
            return None
        return self.response_metadata.status_code


class DecodeError(NsApiError):
    """Raised when a response body could not be decoded.

    The cache is never populated for a request whose response failed to
    decode.

    Attributes:
        text: The raw response text that failed to decode.
    """

    def __init__(self, message: str, text: str | None = None):
        super().__init__(message)
        self.text = text


__all__ = [
    "ApiError",
    "ClientShutdownError",
    "ConfigurationError",
    "DecodeError",
    "NsApiError",
    "RequestBlockedError",
    "RequestCancelledError",
]
