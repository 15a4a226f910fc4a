"""Parser for brace-delimited property literals.

A property literal looks like ``{name: "Alice", age: 30, active: true}``.
Values are coerced in a fixed order: quoted string, integer, float,
boolean, null, and finally the raw text as a string. Entries without a
colon are skipped rather than failing the whole literal.
"""

import re
from typing import List

import structlog

from ..exceptions import ParseError
from ..models.types import Properties, PropertyValue

logger = structlog.get_logger(__name__)

_INTEGER_RE = re.compile(r"^\d+$")
_FLOAT_RE = re.compile(r"^\d+\.\d+$")
_QUOTES = ("'", '"')


def split_entries(content: str) -> List[str]:
    """Split literal content on top-level commas.

    Commas inside single- or double-quoted strings are not separators.

    Args:
        content: Literal text without the outer braces

    Returns:
        Trimmed, non-empty entries

    Raises:
        ParseError: If a quoted string is never closed
    """
    entries = []
    current = []
    quote_char = None

    for char in content:
        if quote_char is None and char in _QUOTES:
            quote_char = char
            current.append(char)
        elif char == quote_char:
            quote_char = None
            current.append(char)
        elif char == "," and quote_char is None:
            entries.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    if quote_char is not None:
        raise ParseError(f"Unbalanced {quote_char} quote in property literal", content)

    last = "".join(current).strip()
    if last:
        entries.append(last)

    return [entry for entry in entries if entry]


def coerce_value(text: str) -> PropertyValue:
    """Convert value text to a scalar."""
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        return text[1:-1]
    if _INTEGER_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    if text == "true":
        return True
    if text == "false":
        return False
    if text == "null":
        return None
    return text


def parse_properties(literal: str) -> Properties:
    """Parse a property literal into a property map.

    Args:
        literal: Literal text, with or without the outer braces

    Returns:
        Dictionary of coerced property values

    Raises:
        ParseError: If a quoted value is unbalanced
    """
    content = literal.strip()
    if content.startswith("{"):
        content = content[1:]
    if content.endswith("}"):
        content = content[:-1]
    content = content.strip()

    if not content:
        return {}

    properties: Properties = {}
    for entry in split_entries(content):
        key, sep, value_text = entry.partition(":")
        key = key.strip()
        if not sep or not key:
            logger.debug("Skipping malformed property entry", entry=entry)
            continue
        properties[key] = coerce_value(value_text.strip())

    return properties
