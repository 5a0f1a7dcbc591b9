# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for response decoders."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DecoderProtocol(Protocol):
    """
    Protocol for turning response text into structured data.

    Decoders run after a successful network call and before the result is
    cached or delivered.
    """

    def decode(self, text: str) -> Any:
        """
        Decode response text.

        Raises:
            DecodeError: If the text is not well-formed
        """
        ...
