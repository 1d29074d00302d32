"""
Decimal text codec for metric values.

Snapshot files hold a single unsigned integer in canonical decimal form.
Conversion is done in fixed-size digit chunks so values of any magnitude
round-trip, independent of the interpreter's int/str digit limit.
"""
from __future__ import annotations

import re
from typing import Any

import numpy as np

from .exceptions import ParseError

_DIGITS = re.compile(r"[0-9]+")

# Well below sys.get_int_max_str_digits() default of 4300
_CHUNK_DIGITS = 1000
_CHUNK_BASE = 10**_CHUNK_DIGITS


def as_metric(value: Any) -> int:
    """Coerce a measured value to a non-negative Python int.

    Accepts ``int``, numpy integer scalars, and 0-d numpy integer arrays.
    """
    if isinstance(value, np.ndarray):
        if value.shape != () or not np.issubdtype(value.dtype, np.integer):
            raise TypeError(f"Metric must be an integer scalar, got array of shape {value.shape}")
        value = value.item()

    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"Metric must be an integer, got {type(value).__name__}")

    value = int(value)
    if value < 0:
        raise ValueError(f"Metric must be non-negative, got {value}")
    return value


def encode(value: Any) -> str:
    """Encode a metric as canonical decimal text."""
    value = as_metric(value)
    if value < _CHUNK_BASE:
        return str(value)

    chunks = []
    while value:
        value, chunk = divmod(value, _CHUNK_BASE)
        chunks.append(chunk)

    head = str(chunks.pop())
    return head + "".join(str(chunk).zfill(_CHUNK_DIGITS) for chunk in reversed(chunks))


def decode(text: str) -> int:
    """Decode decimal text into a metric.

    Raises:
        ParseError: on empty input, a sign, or any non-digit character.
    """
    if not text:
        raise ParseError(text, "empty input")
    if text[0] in "+-":
        raise ParseError(text, "sign not allowed")
    if not _DIGITS.fullmatch(text):
        raise ParseError(text, "non-digit character")

    value = 0
    for start in range(0, len(text), _CHUNK_DIGITS):
        chunk = text[start:start + _CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value
