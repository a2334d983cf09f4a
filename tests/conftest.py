"""Shared share records for the test suite."""

import pytest


def encode(value: int, base: int) -> str:
    """Write a non-negative integer in *base* using digits 0-9a-z."""
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, base)
        out.append(digits[rem])
    return "".join(reversed(out))


@pytest.fixture
def small_record() -> dict:
    # f(x) = x^2 + 3
    return {
        "keys": {"n": 4, "k": 3},
        "1": {"base": "10", "value": "4"},
        "2": {"base": "2", "value": "111"},
        "3": {"base": "10", "value": "12"},
        "6": {"base": "4", "value": "213"},
    }


LARGE_SECRET = 79836264049851 * 10**20 + 123456789


@pytest.fixture
def large_record() -> dict:
    """Degree-6 record whose secret is far beyond 2**53."""
    coeffs = [LARGE_SECRET, 3, 5, 7, 11, 13, 17]
    bases = [6, 15, 15, 16, 8, 3, 3, 6, 12, 7]
    record: dict = {"keys": {"n": 10, "k": 7}}
    for x, base in enumerate(bases, start=1):
        y = sum(c * x**power for power, c in enumerate(coeffs))
        record[str(x)] = {"base": str(base), "value": encode(y, base)}
    return record


@pytest.fixture
def large_secret() -> int:
    return LARGE_SECRET
