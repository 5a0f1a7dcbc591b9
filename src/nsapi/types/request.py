# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request metadata types for scheduling.

This module defines the request categories that select a cadence constraint
and the metadata that travels with every submitted request.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class RequestCategory(Enum):
    """Category of a request, used to pick the cadence constraint.

    - PLAIN: Ordinary API call. Only the general cadence floor applies.
    - RECRUITMENT_TELEGRAM: Telegram sent for recruitment. Subject to the
      general floor and the recruitment telegram floor.
    - NON_RECRUITMENT_TELEGRAM: Any other telegram. Subject to the general
      floor and the non-recruitment telegram floor.

    Both telegram categories share a single "last telegram" anchor, so a
    telegram of either kind resets the cooldown used by the other.
    """

    PLAIN = "plain"
    RECRUITMENT_TELEGRAM = "recruitment_telegram"
    NON_RECRUITMENT_TELEGRAM = "non_recruitment_telegram"

    @property
    def is_telegram(self) -> bool:
        return self is not RequestCategory.PLAIN


class TelegramType(Enum):
    """The telegram type specified for the purposes of rate limitation."""

    RECRUITMENT = 1
    NON_RECRUITMENT = 2

    @property
    def category(self) -> RequestCategory:
        """Request category the scheduler uses for this telegram type."""
        if self is TelegramType.RECRUITMENT:
            return RequestCategory.RECRUITMENT_TELEGRAM
        return RequestCategory.NON_RECRUITMENT_TELEGRAM


def _new_request_id() -> str:
    return uuid.uuid4().hex


@dataclass
class RequestMetadata:
    """
    Metadata identifying one call to the remote API.

    Attributes:
        category: Cadence category of the request
        fingerprint: Canonical cache key, or None if the request must never
            be cached (telegrams, authentication checks, commands and any
            request carrying credentials)
        path: Query string or path used for logging and debugging
        request_id: Unique identifier for this request instance
        submitted_at: UTC timestamp when the request was created
    """

    category: RequestCategory = RequestCategory.PLAIN
    fingerprint: str | None = None
    path: str | None = None
    request_id: str = field(default_factory=_new_request_id)
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def cacheable(self) -> bool:
        return self.fingerprint is not None


__all__ = ["RequestCategory", "RequestMetadata", "TelegramType"]
