"""Datetime transcoding between PocketBase and RFC 3339 JSON text.

PocketBase serializes datetimes as ``"2006-01-02 15:04:05.000Z"``. These helpers
rewrite the separator directly in raw JSON so they can run before (or after)
structured (de)serialization. Text that does not match is left untouched.
"""

from __future__ import annotations

import re
from typing import TypeVar

_Text = TypeVar("_Text", bytes, str)

_BACKEND_TIME = re.compile(rb'"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d{1,3})?Z"')
_STANDARD_TIME = re.compile(rb'"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,3})?Z"')


def _swap_separator(pattern: re.Pattern[bytes], old: bytes, new: bytes, data: _Text) -> _Text:
    if isinstance(data, str):
        return _swap_separator(pattern, old, new, data.encode("utf-8")).decode("utf-8")
    return pattern.sub(lambda m: m.group(0).replace(old, new, 1), data)


def to_standard(data: _Text) -> _Text:
    """Convert quoted PocketBase datetimes to RFC 3339 (``T`` separator)."""
    return _swap_separator(_BACKEND_TIME, b" ", b"T", data)


def to_backend(data: _Text) -> _Text:
    """Convert quoted RFC 3339 datetimes back to the PocketBase format."""
    return _swap_separator(_STANDARD_TIME, b"T", b" ", data)
