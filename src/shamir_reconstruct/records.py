"""Parsing of share records as supplied by the harness.

A record is a JSON object::

    {
      "keys": {"n": 4, "k": 3},
      "1": {"base": "10", "value": "4"},
      "2": {"base": "2", "value": "111"},
      ...
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

from .crypto.decoding import Share, parse_decimal
from .errors import InsufficientPoints, InvalidEncoding

logger = logging.getLogger(__name__)

KEYS_FIELD = "keys"


@dataclass(frozen=True)
class ShareRecord:
    """A parsed share record.

    Attributes:
        n: Total number of shares the record claims to hold.
        k: Reconstruction threshold.
        shares: Shares in record order.
    """

    n: int
    k: int
    shares: tuple[Share, ...]

    @property
    def degree(self) -> int:
        return self.k - 1


def _read_int(keys: Mapping[str, Any], name: str) -> int:
    if name not in keys:
        raise InvalidEncoding(f"'{KEYS_FIELD}' is missing '{name}'")
    value = parse_decimal(keys[name])
    if value is None:
        raise InvalidEncoding(
            f"'{name}' must be an integer, got {keys[name]!r}"
        )
    return value


def parse_record(record: Mapping[str, Any]) -> ShareRecord:
    """Turn a decoded JSON record into a :class:`ShareRecord`.

    Args:
        record: Mapping with a ``keys`` object and one entry per share.

    Returns:
        The parsed record; share order follows the mapping's order.

    Raises:
        InvalidEncoding: If ``keys`` is missing or malformed, ``k < 1``,
            or a share entry is malformed.
        InsufficientPoints: If the record holds fewer than ``k`` shares.
    """
    if not isinstance(record, Mapping):
        raise InvalidEncoding("record must be a JSON object")
    keys = record.get(KEYS_FIELD)
    if not isinstance(keys, Mapping):
        raise InvalidEncoding(f"record is missing the '{KEYS_FIELD}' object")

    n = _read_int(keys, "n")
    k = _read_int(keys, "k")
    if k < 1:
        raise InvalidEncoding(f"threshold k must be >= 1, got {k}")

    shares = tuple(
        Share.from_record(key, entry)
        for key, entry in record.items()
        if key != KEYS_FIELD
    )

    if n != len(shares):
        logger.warning("Record declares n=%d but holds %d shares", n, len(shares))
    if len(shares) < k:
        raise InsufficientPoints(
            f"Need at least {k} shares for threshold {k}, got {len(shares)}"
        )

    return ShareRecord(n=n, k=k, shares=shares)


def read_record(path: Union[str, Path]) -> Any:
    """Read the raw JSON document of a share record without validating it.

    Raises:
        OSError: If the file cannot be read.
        InvalidEncoding: If the file is not valid UTF-8 JSON.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as exc:
            # JSONDecodeError, UnicodeDecodeError, or an over-long integer literal
            raise InvalidEncoding(f"{path}: not valid UTF-8 JSON ({exc})") from None
    return data


def load_record(path: Union[str, Path]) -> ShareRecord:
    """Read and parse a share record from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        InvalidEncoding: If the file is not valid JSON or the record is
            malformed.
        InsufficientPoints: If the record holds fewer than ``k`` shares.
    """
    return parse_record(read_record(path))
