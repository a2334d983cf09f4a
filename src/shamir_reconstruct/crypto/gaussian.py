"""Gaussian-elimination reconstruction used as an independent cross-check.

The polynomial coefficients are solved from the Vandermonde system
``V · c = y`` in float64 with partial pivoting.  The result is only an
estimate; the exact secret comes from :mod:`.lagrange`.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ..errors import DegenerateInput, InsufficientPoints
from .decoding import Point

logger = logging.getLogger(__name__)


def _augmented_matrix(points: Sequence[Point], size: int) -> np.ndarray:
    """Build the ``size × (size + 1)`` augmented Vandermonde matrix ``[V | y]``.

    Row *i* holds ``x_i^{size-1}, …, x_i, 1, y_i`` so the last unknown is
    the constant term.  Powers are formed as exact integers before the
    single conversion to float64.

    Raises:
        DegenerateInput: If an entry does not fit in a float64.
    """
    matrix = np.empty((size, size + 1), dtype=np.float64)
    for i, point in enumerate(points[:size]):
        try:
            for j in range(size):
                matrix[i, j] = float(point.x ** (size - 1 - j))
            matrix[i, size] = float(point.y)
        except OverflowError:
            raise DegenerateInput(
                f"point x={point.x} has values too large for float64 elimination"
            ) from None
    return matrix


def _eliminate(matrix: np.ndarray, size: int) -> np.ndarray:
    """Solve the augmented system in place and return the coefficient vector."""
    for i in range(size):
        pivot_row = i + int(np.argmax(np.abs(matrix[i:, i])))
        if matrix[pivot_row, i] == 0.0:
            raise DegenerateInput(f"Singular system: zero pivot in column {i}")
        if pivot_row != i:
            matrix[[i, pivot_row]] = matrix[[pivot_row, i]]

        for k in range(i + 1, size):
            factor = matrix[k, i] / matrix[i, i]
            matrix[k, i:] -= factor * matrix[i, i:]

    coefficients = np.zeros(size, dtype=np.float64)
    for i in range(size - 1, -1, -1):
        acc = matrix[i, size] - np.dot(matrix[i, i + 1:size], coefficients[i + 1:])
        coefficients[i] = acc / matrix[i, i]
    return coefficients


def gaussian_constant_term(points: Sequence[Point], degree: int) -> float:
    """Estimate the constant term by solving for all polynomial coefficients.

    Only the first ``degree + 1`` points take part; any further points are
    ignored.  Elimination uses partial pivoting (the row with the largest
    absolute value in the current column becomes the pivot), followed by
    back-substitution.

    Args:
        points: Evaluation points; at least ``degree + 1`` of them.
        degree: Degree of the polynomial (``k - 1``).

    Returns:
        The constant-term coefficient as a float.

    Raises:
        InsufficientPoints: If *degree* is negative or fewer than
            ``degree + 1`` points are supplied.
        DegenerateInput: On duplicate x-coordinates, a zero pivot, values
            outside the float64 range, or a non-finite solution.
    """
    if degree < 0:
        raise InsufficientPoints(f"degree must be >= 0, got {degree}")
    size = degree + 1
    if len(points) < size:
        raise InsufficientPoints(
            f"Need at least {size} points for degree {degree}, "
            f"got {len(points)}"
        )

    xs = [p.x for p in points[:size]]
    if len(set(xs)) != len(xs):
        raise DegenerateInput(f"Duplicate x-coordinates among {xs}")

    matrix = _augmented_matrix(points, size)

    try:
        with np.errstate(over="raise", invalid="raise", divide="raise"):
            coefficients = _eliminate(matrix, size)
    except FloatingPointError as exc:
        raise DegenerateInput(f"Elimination left the float64 range: {exc}") from None

    if not np.all(np.isfinite(coefficients)):
        raise DegenerateInput("Elimination produced non-finite coefficients")

    logger.debug("Elimination coefficients: %s", coefficients)
    return float(coefficients[size - 1])
