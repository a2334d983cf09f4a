"""Base-N decoding of share values into exact integers.

Share values arrive as digit strings in an arbitrary base between 2 and
36 (alphabet ``0-9a-z``).  Decoding never passes through a fixed-width or
floating-point intermediate, so secrets well beyond 2**53 survive intact.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..errors import InvalidEncoding

MIN_BASE = 2
MAX_BASE = 36
DIGITS = string.digits + string.ascii_lowercase
_CHUNK_DIGITS = 1000


def parse_decimal(raw: Any) -> Optional[int]:
    """Parse an ``int`` or a plain signed decimal string; ``None`` otherwise."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    digits = text[1:] if text[:1] in "+-" else text
    if not digits or any(ch not in string.digits for ch in digits):
        return None
    return int(text)


@dataclass(frozen=True)
class Share:
    """One encoded ``(x, y)`` sample of the secret polynomial.

    Attributes:
        index: The x-coordinate of the share.
        base: Numeric base of *raw_value*.
        raw_value: Digit string holding the y-coordinate.
    """

    index: int
    base: int
    raw_value: str

    @classmethod
    def from_record(cls, key: str, entry: Mapping[str, Any]) -> "Share":
        """Build a share from a record entry ``"x": {"base": .., "value": ..}``.

        Raises:
            InvalidEncoding: If the key is not an integer or the entry
                lacks a usable ``base`` / ``value``.
        """
        index = parse_decimal(key)
        if index is None:
            raise InvalidEncoding(
                f"share key {key!r} is not an integer x-coordinate"
            )
        if not isinstance(entry, Mapping):
            raise InvalidEncoding(f"share {index}: entry must be an object")
        if "base" not in entry or "value" not in entry:
            raise InvalidEncoding(
                f"share {index}: entry needs both 'base' and 'value'"
            )
        base = parse_decimal(entry["base"])
        if base is None:
            raise InvalidEncoding(
                f"share {index}: base {entry['base']!r} is not an integer"
            )

        value = entry["value"]
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise InvalidEncoding(
                f"share {index}: value must be a string, got {value!r}"
            )
        return cls(index=index, base=base, raw_value=value)


@dataclass(frozen=True)
class Point:
    """A decoded evaluation point ``(x, y)`` with an exact integer *y*."""

    x: int
    y: int


def decode(raw_value: str, base: int) -> int:
    """Decode *raw_value* written in *base* into an exact integer.

    Surrounding whitespace is ignored and digits are case-insensitive.
    Signs, prefixes such as ``0x`` and digit separators are rejected.

    Args:
        raw_value: Digit string to decode.
        base: Numeric base in ``[2, 36]``.

    Returns:
        The non-negative integer value of *raw_value*.

    Raises:
        InvalidEncoding: If *base* is out of range, the string is empty,
            or it holds a digit that is not valid in *base*.
    """
    if isinstance(base, bool) or not isinstance(base, int):
        raise InvalidEncoding(f"base must be an integer, got {base!r}")
    if not MIN_BASE <= base <= MAX_BASE:
        raise InvalidEncoding(
            f"base {base} is outside [{MIN_BASE}, {MAX_BASE}]"
        )

    if not isinstance(raw_value, str):
        raise InvalidEncoding(f"value must be a string, got {raw_value!r}")

    digits = raw_value.strip().lower()
    if not digits:
        raise InvalidEncoding("value string is empty")

    allowed = DIGITS[:base]
    for ch in digits:
        if ch not in allowed:
            raise InvalidEncoding(
                f"digit {ch!r} is not valid in base {base} (value {raw_value!r})"
            )

    # int() refuses very long non-power-of-two strings, so go chunk by chunk.
    value = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start:start + _CHUNK_DIGITS]
        value = value * base ** len(chunk) + int(chunk, base)
    return value


def decode_share(share: Share) -> Point:
    """Decode a :class:`Share` into a :class:`Point`.

    Raises:
        InvalidEncoding: If the share's value cannot be decoded; the
            message names the offending x-coordinate.
    """
    try:
        y = decode(share.raw_value, share.base)
    except InvalidEncoding as exc:
        raise InvalidEncoding(f"share {share.index}: {exc}") from exc
    return Point(x=share.index, y=y)
