# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pluggable nsapi components.

Available protocols:
- TransportProtocol: Interface for the network transport
- DecoderProtocol: Interface for response decoders
"""

from .decoder import DecoderProtocol
from .transport import TransportProtocol

__all__ = [
    "DecoderProtocol",
    "TransportProtocol",
]
