# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Response types returned by transports.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator


class ResponseMetadata(BaseModel):
    """
    Status code and headers of an HTTP response.

    Header names are normalized to lower case on construction so lookups
    do not depend on the casing the server used.
    """

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _lowercase_headers(cls, value: Mapping[str, str] | None) -> dict[str, str]:
        if value is None:
            return {}
        return {str(k).lower(): str(v) for k, v in dict(value).items()}

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())

    @property
    def ok(self) -> bool:
        return self.status_code == 200


@dataclass
class RawResponse:
    """
    Undecoded response from the remote API.

    Attributes:
        text: Response body as text
        metadata: Status code and headers
    """

    text: str
    metadata: ResponseMetadata


__all__ = ["RawResponse", "ResponseMetadata"]
