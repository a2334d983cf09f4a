"""Exact Lagrange interpolation for secret reconstruction.

The constant term of the interpolating polynomial is assembled from
``(numerator, denominator)`` pairs of arbitrary-precision integers and
divided exactly once at the very end.  Optionally all arithmetic is
carried out modulo a prime, matching shares produced over GF(p).
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Optional, Sequence

from ..errors import DegenerateInput, InsufficientPoints
from .decoding import Point
from .utils import mod_inv, nearest_div

logger = logging.getLogger(__name__)


def _lagrange_basis(
    points: Sequence[Point],
    j: int,
    at: int = 0,
    prime: Optional[int] = None,
) -> tuple[int, int]:
    """Compute the Lagrange basis coefficient for index *j*.

    Returns the pair ``(numerator, denominator)`` of the basis
    polynomial evaluated at ``x = at``::

        ℓ_j(at) = ∏_{m ≠ j}  (at - x_m) / (x_j - x_m)

    When *prime* is ``None`` the values are kept as exact rational
    components; when a prime is given they are reduced modulo that prime.

    Args:
        points: The set of evaluation points.
        j: Index into *points* selecting the basis element.
        at: The abscissa at which the basis is evaluated.
        prime: Optional prime modulus for modular arithmetic.

    Returns:
        ``(numerator, denominator)`` of the basis value at *at*.

    Raises:
        DegenerateInput: If duplicate x-coordinates are detected.
    """
    x_j = points[j].x
    num = 1
    den = 1
    for m, point in enumerate(points):
        if m == j:
            continue
        if point.x == x_j:
            raise DegenerateInput(
                f"Duplicate x-coordinate {x_j} at indices {j} and {m}"
            )
        num *= at - point.x
        den *= x_j - point.x

    if prime is not None:
        num %= prime
        den %= prime

    return num, den


def _rational_sum(points: Sequence[Point], at: int) -> tuple[int, int]:
    """Return ``(numerator, denominator)`` of the interpolant at *at*.

    s = Σ_j  y_j · num_j / den_j  =  (Σ_j y_j · num_j · D/den_j) / D
    where D = ∏ den_j.
    """
    bases: list[tuple[int, int]] = []
    common_den = 1
    for j in range(len(points)):
        num_j, den_j = _lagrange_basis(points, j, at)
        bases.append((num_j, den_j))
        common_den *= den_j

    numerator = 0
    for point, (num_j, den_j) in zip(points, bases):
        numerator += point.y * num_j * (common_den // den_j)

    return numerator, common_den


def lagrange_constant_term(
    points: Sequence[Point],
    prime: Optional[int] = None,
) -> int:
    """Reconstruct the constant term ``f(0)`` from *points*.

    Every supplied point takes part; callers pick the ``degree + 1``
    points beforehand (see :func:`shamir_reconstruct.reconstruct.select_points`).

    Args:
        points: Evaluation points with pairwise distinct x-coordinates.
        prime: Optional prime modulus.  When given the result is reduced
               into ``[0, prime)``.

    Returns:
        The reconstructed secret as an exact integer.  If the rational
        result is not integral the nearest integer is returned and a
        warning is logged.

    Raises:
        InsufficientPoints: If *points* is empty.
        DegenerateInput: If two points share an x-coordinate (or collide
            modulo *prime*).
    """
    if not points:
        raise InsufficientPoints("Need at least 1 point to interpolate, got 0")

    if prime is not None:
        # Modular reconstruction
        secret = 0
        for j, point in enumerate(points):
            num, den = _lagrange_basis(points, j, prime=prime)
            try:
                den_inv = mod_inv(den, prime)
            except ValueError:
                raise DegenerateInput(
                    f"x-coordinate {point.x} collides with another point "
                    f"modulo {prime}"
                ) from None
            secret = (secret + point.y * num % prime * den_inv) % prime
        return secret

    numerator, common_den = _rational_sum(points, 0)
    if numerator % common_den != 0:
        secret = nearest_div(numerator, common_den)
        logger.warning(
            "Interpolated constant term %s is not an integer; "
            "rounded to %d", Fraction(numerator, common_den), secret,
        )
        return secret
    return numerator // common_den


def lagrange_evaluate(points: Sequence[Point], x: int) -> Fraction:
    """Evaluate the interpolant through *points* at *x*, exactly.

    Used to check that surplus shares lie on the reconstructed polynomial.

    Args:
        points: Evaluation points with pairwise distinct x-coordinates.
        x: Abscissa to evaluate at.

    Returns:
        ``f(x)`` as an exact :class:`fractions.Fraction`.

    Raises:
        InsufficientPoints: If *points* is empty.
        DegenerateInput: If two points share an x-coordinate.
    """
    if not points:
        raise InsufficientPoints("Need at least 1 point to interpolate, got 0")
    numerator, common_den = _rational_sum(points, x)
    return Fraction(numerator, common_den)
