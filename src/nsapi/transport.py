# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP transport for nsapi.

HttpxTransport performs exactly one GET per call. It never retries: a
failed call is reported once and retry policy stays with the caller.
"""

import logging
from collections.abc import Mapping

import httpx

from .exceptions import ApiError
from .types.response import RawResponse, ResponseMetadata

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpxTransport:
    """
    Transport backed by ``httpx.AsyncClient``.

    Args:
        base_url: Full URL of the API endpoint
        user_agent: Value sent in the User-Agent header
        timeout: Request timeout in seconds
        client: Optional pre-built client (e.g. one using httpx.MockTransport).
            A client passed in is not closed by aclose().
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def get_headers(self) -> dict[str, str]:
        return dict(self._headers)

    def url_for(self, query: str) -> str:
        if not query:
            return self._base_url
        return f"{self._base_url}?{query}"

    async def fetch(
        self,
        query: str,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        request_headers = self.get_headers()
        if headers:
            request_headers.update(headers)

        url = self.url_for(query)
        try:
            response = await self._client.get(url, headers=request_headers)
        except httpx.HTTPError as e:
            logger.warning(f"Request to {self._base_url} failed: {e!r}")
            raise ApiError(f"Request failed: {e}") from e

        metadata = ResponseMetadata(
            status_code=response.status_code,
            headers=dict(response.headers),
        )
        if response.status_code != 200:
            raise ApiError(
                f"API returned HTTP response code {response.status_code}",
                response_metadata=metadata,
            )

        return RawResponse(text=response.text, metadata=metadata)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["DEFAULT_TIMEOUT", "HttpxTransport"]
