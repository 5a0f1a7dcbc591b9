# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Public client for the NationStates API.

NsApi turns logical requests (nation, region, world and World Assembly
shards, telegrams, authentication checks and private commands) into
scheduled calls. Every call goes through one Scheduler, so all of them
share the API's rate limits no matter how many coroutines use the client.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from enum import IntEnum
from typing import Any

from typing_extensions import Self

from ..decoding.decoder import XmlDecoder
from ..exceptions import ApiError, ConfigurationError
from ..protocols.decoder import DecoderProtocol
from ..protocols.transport import TransportProtocol
from ..scheduler.config import (
    MIN_API_DELAY,
    MIN_NON_RECRUIT_TELEGRAM_DELAY,
    MIN_RECRUIT_TELEGRAM_DELAY,
    CacheConfig,
    SchedulerConfig,
    SchedulerMode,
)
from ..scheduler.scheduler import Scheduler
from ..transport import DEFAULT_TIMEOUT, HttpxTransport
from ..types.request import RequestCategory, RequestMetadata, TelegramType
from ..types.response import RawResponse
from .auth import Auth
from .request import BASE_URL, ParamValue, build_user_agent, encode_query, fingerprint, shard_query

logger = logging.getLogger(__name__)


class WorldAssemblyCouncil(IntEnum):
    """The council of the World Assembly to request data for."""

    GENERAL_ASSEMBLY = 1
    SECURITY_COUNCIL = 2


class NsApi:
    """
    Rate-limited client for the NationStates API.

    Args:
        user_agent: Identifies your application to the API (e.g. your
            nation's name or an email address). Required by the API's terms.
        delay: Enforce the API's rate limits. Disable only against a mock.
        api_delay: Seconds between requests (at least 0.6)
        recruit_telegram_delay: Seconds since the last telegram before a
            recruitment telegram (at least 180)
        non_recruit_telegram_delay: Seconds since the last telegram before a
            non-recruitment telegram (at least 60)
        cache_enabled: Serve identical shard requests from the cache
        cache_validity: Seconds cached responses stay fresh, or None for
            never
        allow_immediate_requests: Let the first request go out right away
            instead of waiting a full cadence interval
        request_timeout: HTTP timeout in seconds
        base_url: API endpoint URL
        metrics_enabled: Report Prometheus metrics
        test_mode: Relax the delay floors to "non-negative"
        transport: Custom transport (defaults to HttpxTransport)
        decoder: Custom response decoder (defaults to XmlDecoder)

    Example:
        >>> async with NsApi("Testlandia") as api:
        ...     data = await api.nation_request("testlandia", ["name", "region"])
        ...     data["name"]
        'Testlandia'
    """

    def __init__(
        self,
        user_agent: str,
        *,
        delay: bool = True,
        api_delay: float = MIN_API_DELAY,
        recruit_telegram_delay: float = MIN_RECRUIT_TELEGRAM_DELAY,
        non_recruit_telegram_delay: float = MIN_NON_RECRUIT_TELEGRAM_DELAY,
        cache_enabled: bool = True,
        cache_validity: float | None = 900.0,
        allow_immediate_requests: bool = False,
        request_timeout: float = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL,
        metrics_enabled: bool = False,
        test_mode: bool = False,
        transport: TransportProtocol | None = None,
        decoder: DecoderProtocol | None = None,
    ) -> None:
        self._user_agent = build_user_agent(user_agent)

        scheduler_config = SchedulerConfig(
            mode=SchedulerMode.THROTTLED if delay else SchedulerMode.UNTHROTTLED,
            api_delay=api_delay,
            recruit_telegram_delay=recruit_telegram_delay,
            non_recruit_telegram_delay=non_recruit_telegram_delay,
            allow_immediate_requests=allow_immediate_requests,
            metrics_enabled=metrics_enabled,
            test_mode=test_mode,
        )
        cache_config = CacheConfig(enabled=cache_enabled, validity=cache_validity)

        self._owns_transport = transport is None
        self._transport: TransportProtocol = transport or HttpxTransport(
            base_url, self._user_agent, timeout=request_timeout
        )
        self._decoder: DecoderProtocol = decoder or XmlDecoder()
        self._scheduler = Scheduler(config=scheduler_config, cache_config=cache_config)

    # === Settings ===

    @property
    def user_agent(self) -> str:
        """The full User-Agent header sent with requests."""
        return self._user_agent

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def delay(self) -> bool:
        """Whether rate limits are enforced."""
        return self._scheduler.mode is SchedulerMode.THROTTLED

    @delay.setter
    def delay(self, enabled: bool) -> None:
        self._scheduler.set_mode(
            SchedulerMode.THROTTLED if enabled else SchedulerMode.UNTHROTTLED
        )

    @property
    def api_delay(self) -> float:
        return self._scheduler.api_delay

    @api_delay.setter
    def api_delay(self, value: float) -> None:
        self._scheduler.api_delay = value

    @property
    def recruit_telegram_delay(self) -> float:
        return self._scheduler.recruit_telegram_delay

    @recruit_telegram_delay.setter
    def recruit_telegram_delay(self, value: float) -> None:
        self._scheduler.recruit_telegram_delay = value

    @property
    def non_recruit_telegram_delay(self) -> float:
        return self._scheduler.non_recruit_telegram_delay

    @non_recruit_telegram_delay.setter
    def non_recruit_telegram_delay(self, value: float) -> None:
        self._scheduler.non_recruit_telegram_delay = value

    @property
    def cache_enabled(self) -> bool:
        return self._scheduler.cache.enabled

    @cache_enabled.setter
    def cache_enabled(self, enabled: bool) -> None:
        self._scheduler.cache.enabled = enabled

    @property
    def cache_validity(self) -> float | None:
        return self._scheduler.cache.validity

    @cache_validity.setter
    def cache_validity(self, value: float | None) -> None:
        self._scheduler.cache.validity = value

    @property
    def block_existing_requests(self) -> bool:
        """Hold queued requests instead of dispatching them."""
        return self._scheduler.block_existing

    @block_existing_requests.setter
    def block_existing_requests(self, value: bool) -> None:
        self._scheduler.block_existing = value

    @property
    def block_new_requests(self) -> bool:
        """Reject new requests with RequestBlockedError."""
        return self._scheduler.block_new

    @block_new_requests.setter
    def block_new_requests(self, value: bool) -> None:
        self._scheduler.block_new = value

    def clear_cache(self) -> int:
        """Drop every cached response. Returns the number removed."""
        return self._scheduler.cache.clear()

    def clear_queue(self) -> int:
        """
        Fail every queued request with RequestCancelledError.

        Requests already in flight are unaffected. Returns the number of
        requests cancelled.
        """
        return self._scheduler.cancel_all()

    def get_metrics(self) -> dict[str, Any]:
        return self._scheduler.get_metrics()

    # === Shard requests ===

    async def nation_request(
        self,
        nation: str,
        shards: Iterable[str] = (),
        extra_params: Mapping[str, ParamValue] | None = None,
        auth: Auth | None = None,
    ) -> Any:
        """
        Request data from the nation API.

        Passing ``auth`` makes private shards available; such requests are
        never cached.
        """
        return await self._shard_request([("nation", nation)], shards, extra_params, auth)

    async def region_request(
        self,
        region: str,
        shards: Iterable[str] = (),
        extra_params: Mapping[str, ParamValue] | None = None,
    ) -> Any:
        """Request data from the region API."""
        return await self._shard_request([("region", region)], shards, extra_params)

    async def world_request(
        self,
        shards: Iterable[str] = (),
        extra_params: Mapping[str, ParamValue] | None = None,
    ) -> Any:
        """Request data from the world API."""
        return await self._shard_request([], shards, extra_params)

    async def world_assembly_request(
        self,
        council: WorldAssemblyCouncil | int,
        shards: Iterable[str] = (),
        extra_params: Mapping[str, ParamValue] | None = None,
    ) -> Any:
        """Request data from the World Assembly API."""
        council = WorldAssemblyCouncil(council)
        return await self._shard_request([("wa", int(council))], shards, extra_params)

    async def _shard_request(
        self,
        endpoint: list[tuple[str, ParamValue]],
        shards: Iterable[str],
        extra_params: Mapping[str, ParamValue] | None,
        auth: Auth | None = None,
    ) -> Any:
        if isinstance(shards, str):
            raise ConfigurationError(
                f"shards must be an iterable of shard names, not the string {shards!r}"
            )
        shards = list(shards)
        query = shard_query(endpoint, shards, extra_params)
        key = None if auth is not None else fingerprint(endpoint, shards, extra_params)
        return await self._request(
            query,
            decode=self._decoder.decode,
            cache_key=key,
            auth=auth,
        )

    # === Non-shard requests ===

    async def telegram_request(
        self,
        client_key: str,
        tg_id: str,
        tg_key: str,
        recipient: str,
        telegram_type: TelegramType | int,
    ) -> None:
        """
        Send a telegram through the telegram API.

        ``telegram_type`` selects the rate limit the telegram is subject to.

        Raises:
            ApiError: If the API does not answer ``queued``
        """
        telegram_type = TelegramType(telegram_type)
        query = encode_query(
            [
                ("a", "sendTG"),
                ("client", client_key),
                ("tgid", tg_id),
                ("key", tg_key),
                ("to", recipient),
            ]
        )

        def check_queued(text: str) -> None:
            if text.strip().lower() != "queued":
                raise ApiError("Telegram API response did not consist of the string 'queued'")

        await self._request(
            query,
            decode=check_queued,
            category=telegram_type.category,
            path=f"a=sendTG&tgid={tg_id}",
        )

    async def authenticate_request(
        self,
        nation: str,
        checksum: str,
        token: str | None = None,
    ) -> bool:
        """
        Verify a nation's login checksum through the authentication API.

        Returns:
            True if the nation is authenticated, False if not

        Raises:
            ApiError: If the API answers anything other than ``1`` or ``0``
        """
        params: list[tuple[str, ParamValue]] = [
            ("a", "verify"),
            ("nation", nation),
            ("checksum", checksum),
        ]
        if token:
            params.append(("token", token))

        def parse_verdict(text: str) -> bool:
            verdict = text.strip()
            if verdict == "1":
                return True
            if verdict == "0":
                return False
            raise ApiError(
                "Authentication API response did not consist of the string '1' or '0'"
            )

        return await self._request(
            encode_query(params),
            decode=parse_verdict,
            path=f"a=verify&nation={nation}",
        )

    async def nation_command_request(
        self,
        nation: str,
        command: str,
        params: Mapping[str, ParamValue] | None = None,
        *,
        auth: Auth,
    ) -> Any:
        """
        Execute a private nation command (e.g. ``issue`` or ``giftcard``).

        Commands are never cached.
        """
        query_params: list[tuple[str, ParamValue]] = [("nation", nation), ("c", command)]
        if params:
            query_params.extend(params.items())
        return await self._request(
            encode_query(query_params),
            decode=self._decoder.decode,
            auth=auth,
            path=f"nation={nation}&c={command}",
        )

    # === Scheduling ===

    async def _request(
        self,
        query: str,
        decode: Callable[[str], Any],
        category: RequestCategory = RequestCategory.PLAIN,
        cache_key: str | None = None,
        auth: Auth | None = None,
        path: str | None = None,
    ) -> Any:
        transport = self._transport

        def fetch() -> Awaitable[RawResponse]:
            # Credentials are read at dispatch time so a PIN stored by an
            # earlier request in the queue is used.
            headers = auth.headers() if auth is not None else None
            return transport.fetch(query, headers)

        def finish(response: RawResponse) -> Any:
            if auth is not None:
                auth.update_from(response.metadata)
            return decode(response.text)

        metadata = RequestMetadata(
            category=category,
            fingerprint=cache_key,
            path=path if path is not None else query,
        )
        return await self._scheduler.submit(metadata, fetch, finish)

    # === Lifecycle ===

    def shutdown(self) -> int:
        """
        Stop the client permanently without waiting.

        Queued requests fail with RequestCancelledError; later requests
        raise ClientShutdownError.
        """
        return self._scheduler.shutdown()

    async def aclose(self) -> None:
        """Shut down, wait for in-flight requests and close the transport."""
        await self._scheduler.stop()
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()


__all__ = ["NsApi", "WorldAssemblyCouncil"]
