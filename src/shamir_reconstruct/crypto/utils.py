"""Low-level integer utilities for exact share reconstruction."""

from __future__ import annotations


def _extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """Extended Euclidean algorithm returning (gcd, x, y) with a*x + b*y = gcd."""
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    return old_r, old_x, old_y


def mod_inv(a: int, mod: int) -> int:
    """Compute the modular multiplicative inverse of *a* modulo *mod*.

    Uses the extended Euclidean algorithm.

    Args:
        a: The integer to invert.
        mod: The modulus (must be > 1).

    Returns:
        An integer *x* in [0, mod) such that (a * x) % mod == 1.

    Raises:
        ValueError: If *a* and *mod* are not coprime or *mod* < 2.
    """
    if mod < 2:
        raise ValueError("mod must be >= 2")
    a = a % mod
    gcd, x, _ = _extended_gcd(a, mod)
    if gcd != 1:
        raise ValueError(f"{a} has no inverse modulo {mod} (gcd={gcd})")
    return x % mod


def nearest_div(numerator: int, denominator: int) -> int:
    """Divide two integers and round to the nearest integer, exactly.

    Ties are rounded toward positive infinity.  No floating-point value is
    produced along the way, so the result is correct for operands of any
    size.

    Args:
        numerator: The dividend.
        denominator: The divisor (non-zero).

    Returns:
        ``round(numerator / denominator)`` computed in integer arithmetic.

    Raises:
        ZeroDivisionError: If *denominator* is zero.
    """
    if denominator == 0:
        raise ZeroDivisionError("denominator must be non-zero")
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    return (2 * numerator + denominator) // (2 * denominator)
