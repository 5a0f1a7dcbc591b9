# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
NationStates API facade.

This module provides:
- NsApi: The rate-limited client
- Auth: Credentials for private shards and commands
- Request shaping helpers (query strings, fingerprints, User-Agent)
"""

from .auth import Auth
from .client import NsApi, WorldAssemblyCouncil
from .request import (
    API_VERSION,
    BASE_URL,
    VERSION,
    build_user_agent,
    encode_query,
    encode_shards,
    fingerprint,
    shard_query,
)

__all__ = [
    "API_VERSION",
    "BASE_URL",
    "VERSION",
    "Auth",
    "NsApi",
    "WorldAssemblyCouncil",
    "build_user_agent",
    "encode_query",
    "encode_shards",
    "fingerprint",
    "shard_query",
]
