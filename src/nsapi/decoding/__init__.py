# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Response decoders for nsapi."""

from .decoder import TEXT_KEY, XmlDecoder, convert_scalar, normalize_text

__all__ = ["TEXT_KEY", "XmlDecoder", "convert_scalar", "normalize_text"]
