# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
XML response decoder for nsapi.

Turns API responses into plain dicts, lists and scalars:

- The root element is dropped; its content is returned.
- Tag names are lower-cased. Attribute names are kept as sent.
- Text is trimmed and runs of whitespace collapse to one space.
- Attributes are merged into the element's mapping.
- An element with only text becomes that text. Text of an element that
  also has attributes or children is stored under ``"value"``.
- A child appearing once stays a scalar; repeated children become a list.
- Numeric text and attribute values become ``int`` or ``float``.
- An element with no text, attributes or children becomes ``""``.
"""

import logging
import re
from typing import Any
from xml.etree import ElementTree as ET

from ..exceptions import DecodeError

logger = logging.getLogger(__name__)

TEXT_KEY = "value"

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")


def convert_scalar(value: str) -> Any:
    """Convert numeric strings to ``int``/``float``; return others unchanged."""
    if _INT_RE.fullmatch(value):
        return int(value)
    if _FLOAT_RE.fullmatch(value):
        return float(value)
    return value


def normalize_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def _local_name(tag: str) -> str:
    # Drop any "{namespace}" prefix ElementTree adds.
    if tag.startswith("{"):
        tag = tag.split("}", 1)[1]
    return tag.lower()


def _add(mapping: dict[str, Any], key: str, value: Any) -> None:
    if key not in mapping:
        mapping[key] = value
    elif isinstance(mapping[key], list):
        mapping[key].append(value)
    else:
        mapping[key] = [mapping[key], value]


class XmlDecoder:
    """
    Decoder for the API's XML responses.

    Example:
        >>> XmlDecoder().decode("<NATION id='x'><NAME>Testlandia</NAME></NATION>")
        {'id': 'x', 'name': 'Testlandia'}
    """

    def decode(self, text: str) -> Any:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            logger.debug(f"Failed to parse XML response: {e}")
            raise DecodeError(f"Malformed XML response: {e}", text=text) from e
        return self.convert_element(root)

    def convert_element(self, element: ET.Element) -> Any:
        """Convert one element (and its subtree) to plain data."""
        node: dict[str, Any] = {}

        for name, value in element.attrib.items():
            _add(node, name, convert_scalar(value))

        for child in element:
            _add(node, _local_name(child.tag), self.convert_element(child))

        # Mixed content: the element's own text plus the tails of its children.
        parts = [element.text or ""]
        parts.extend(child.tail or "" for child in element)
        text = normalize_text("".join(parts))

        if text:
            value = convert_scalar(text)
            if not node:
                return value
            _add(node, TEXT_KEY, value)

        if not node:
            return ""
        return node


__all__ = ["TEXT_KEY", "XmlDecoder", "convert_scalar", "normalize_text"]
