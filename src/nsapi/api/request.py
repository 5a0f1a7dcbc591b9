# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request shaping for the NationStates API.

Builds query strings, cache fingerprints and the User-Agent header. Nothing
here knows which shards exist; shard names are passed through verbatim.
"""

from collections.abc import Iterable, Mapping, Sequence
from urllib.parse import quote

from ..exceptions import ConfigurationError

VERSION = "1.0.0"
"""Version of this library, sent in the User-Agent header."""

API_VERSION = 7
"""API version specified in every shard request."""

BASE_URL = "https://www.nationstates.net/cgi-bin/api.cgi"

ParamValue = str | int
Params = Sequence[tuple[str, ParamValue]]


def build_user_agent(user_agent: str) -> str:
    """
    Build the User-Agent header sent with every request.

    Raises:
        ConfigurationError: If ``user_agent`` is not a non-empty string
    """
    if not isinstance(user_agent, str) or not user_agent.strip():
        raise ConfigurationError("A user agent identifying the application is required")
    return f'nsapi-py {VERSION} (used by "{user_agent.strip()}")'


def _quote(value: ParamValue) -> str:
    return quote(str(value), safe="")


def encode_query(params: Params) -> str:
    """Encode ``(name, value)`` pairs in the given order."""
    return "&".join(f"{_quote(name)}={_quote(value)}" for name, value in params)


def encode_shards(shards: Iterable[str]) -> str:
    """Encode each shard name and join them with a literal ``+``."""
    return "+".join(_quote(shard) for shard in shards)


def shard_query(
    endpoint: Params,
    shards: Iterable[str] = (),
    extra_params: Mapping[str, ParamValue] | None = None,
    api_version: int = API_VERSION,
) -> str:
    """
    Build the query string for a shard request.

    Args:
        endpoint: Parameters selecting the API, e.g. ``[("nation", "testlandia")]``.
            Empty for the world API.
        shards: Shard names, requested in the order given
        extra_params: Additional shard parameters (e.g. ``{"scale": 76}``)
        api_version: API version to request

    Returns:
        Encoded query string, e.g. ``nation=testlandia&q=name+region&v=7``
    """
    parts = []
    if endpoint:
        parts.append(encode_query(endpoint))
    parts.append(f"q={encode_shards(shards)}")
    if extra_params:
        parts.append(encode_query(list(extra_params.items())))
    parts.append(f"v={api_version}")
    return "&".join(parts)


def fingerprint(
    endpoint: Params,
    shards: Iterable[str] = (),
    extra_params: Mapping[str, ParamValue] | None = None,
    api_version: int = API_VERSION,
) -> str:
    """
    Canonical cache key for a shard request.

    Independent of the order shards and parameters were given in, so
    requests sending the same shards always share a key. Repeated shards
    are kept. Never call this for requests carrying credentials.
    """
    canonical_shards = sorted(shards)
    canonical_params = sorted((str(k), str(v)) for k, v in (extra_params or {}).items())
    canonical_endpoint = sorted((str(k), str(v)) for k, v in endpoint)
    return shard_query(
        canonical_endpoint,
        canonical_shards,
        dict(canonical_params),
        api_version,
    )


__all__ = [
    "API_VERSION",
    "BASE_URL",
    "VERSION",
    "build_user_agent",
    "encode_query",
    "encode_shards",
    "fingerprint",
    "shard_query",
]
