"""Secret reconstruction: subset selection, the two paths and their cross-check.

Each request is a pure function of its points and degree.  The exact
Lagrange value is authoritative; the Gaussian-elimination estimate only
confirms it.  Requests processed together through
:func:`reconstruct_many` fail independently of one another.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .config import ReconstructionConfig
from .crypto.decoding import Point, decode_share
from .crypto.gaussian import gaussian_constant_term
from .crypto.lagrange import lagrange_constant_term, lagrange_evaluate
from .crypto.utils import mod_inv
from .errors import (
    DegenerateInput,
    InsufficientPoints,
    ReconstructionError,
    ReconstructionMismatch,
)
from .records import ShareRecord, parse_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconstructionResult:
    """Outcome of a successful reconstruction.

    Attributes:
        secret: The exact constant term from Lagrange interpolation.
        degree: Degree of the reconstructed polynomial.
        points: The ``degree + 1`` points that were interpolated.
        gaussian: Floating estimate from elimination, or ``None`` when the
            cross-check was skipped or could not run.
        mismatch: ``True`` if *gaussian* disagrees with *secret* beyond
            tolerance.
        surplus: Points left out of the interpolation, in input order.
        inconsistent: Surplus points that do not lie on the polynomial.
    """

    secret: int
    degree: int
    points: tuple[Point, ...]
    gaussian: Optional[float] = None
    mismatch: bool = False
    surplus: tuple[Point, ...] = ()
    inconsistent: tuple[Point, ...] = ()


@dataclass
class RequestOutcome:
    """Result or failure of one request inside a batch."""

    name: str
    result: Optional[ReconstructionResult] = None
    error: Optional[Exception] = None
    record: Optional[ShareRecord] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None


def select_points(
    points: Sequence[Point],
    degree: int,
    policy: str = "first",
) -> tuple[list[Point], list[Point]]:
    """Split *points* into the ``degree + 1`` to interpolate and the surplus.

    Args:
        points: All decoded points, in input order.
        degree: Polynomial degree.
        policy: ``"first"`` keeps input order; ``"smallest"`` takes the
            smallest x-values (ties keep input order).

    Returns:
        ``(chosen, surplus)``; *surplus* keeps input order.

    Raises:
        InsufficientPoints: If *degree* is negative or too few points.
        ValueError: On an unknown *policy*.
    """
    if degree < 0:
        raise InsufficientPoints(f"degree must be >= 0, got {degree}")
    needed = degree + 1
    if len(points) < needed:
        raise InsufficientPoints(
            f"Need at least {needed} points for degree {degree}, "
            f"got {len(points)}"
        )

    if policy == "first":
        order = list(range(len(points)))
    elif policy == "smallest":
        order = sorted(range(len(points)), key=lambda i: points[i].x)
    else:
        raise ValueError(f"unknown subset policy {policy!r}")

    picked = set(order[:needed])
    chosen = [points[i] for i in order[:needed]]
    surplus = [p for i, p in enumerate(points) if i not in picked]
    return chosen, surplus


def _check_distinct(points: Sequence[Point]) -> None:
    seen: dict[int, int] = {}
    for i, point in enumerate(points):
        if point.x in seen:
            raise DegenerateInput(
                f"Duplicate x-coordinate {point.x} at indices {seen[point.x]} and {i}"
            )
        seen[point.x] = i


def _on_polynomial(chosen: Sequence[Point], point: Point, prime: Optional[int]) -> bool:
    value = lagrange_evaluate(chosen, point.x)
    if prime is None:
        return value == point.y
    reduced = value.numerator % prime * mod_inv(value.denominator, prime) % prime
    return reduced == point.y % prime


def _agree(secret: int, estimate: float, config: ReconstructionConfig) -> bool:
    try:
        exact = float(secret)
    except OverflowError:
        return False
    return math.isclose(
        exact, estimate,
        rel_tol=config.rel_tolerance,
        abs_tol=config.abs_tolerance,
    )


def reconstruct_points(
    points: Sequence[Point],
    degree: int,
    config: Optional[ReconstructionConfig] = None,
) -> ReconstructionResult:
    """Reconstruct the secret from decoded points.

    Both paths interpolate the same ``degree + 1`` points chosen by
    ``config.subset_policy``.  Surplus points are checked against the
    exact interpolant when ``config.verify_surplus`` is set.

    Args:
        points: Decoded points with pairwise distinct x-coordinates.
        degree: Polynomial degree (``k - 1``).
        config: Reconstruction options; defaults are used when omitted.

    Returns:
        A :class:`ReconstructionResult`.

    Raises:
        InsufficientPoints: If fewer than ``degree + 1`` points are given.
        DegenerateInput: If x-coordinates repeat.

    Warns:
        ReconstructionMismatch: If the elimination estimate disagrees with
            the exact secret beyond tolerance.
    """
    config = config or ReconstructionConfig()
    chosen, surplus = select_points(points, degree, config.subset_policy)
    _check_distinct(points)
    logger.debug("Interpolating points %s", [(p.x, p.y) for p in chosen])

    secret = lagrange_constant_term(chosen, prime=config.prime)

    gaussian: Optional[float] = None
    mismatch = False
    if config.prime is not None:
        logger.debug("Modular reconstruction; skipping floating cross-check")
    elif config.cross_check:
        try:
            gaussian = gaussian_constant_term(chosen, degree)
        except DegenerateInput as exc:
            logger.warning("Cross-check unavailable: %s", exc)
        else:
            mismatch = not _agree(secret, gaussian, config)
            if mismatch:
                message = (
                    f"Lagrange secret {secret} and elimination estimate "
                    f"{gaussian!r} disagree"
                )
                logger.warning(message)
                warnings.warn(message, ReconstructionMismatch, stacklevel=2)

    inconsistent: list[Point] = []
    if config.verify_surplus:
        inconsistent = [
            p for p in surplus if not _on_polynomial(chosen, p, config.prime)
        ]
        if inconsistent:
            logger.warning(
                "%d surplus share(s) off the polynomial: x=%s",
                len(inconsistent), [p.x for p in inconsistent],
            )

    return ReconstructionResult(
        secret=secret,
        degree=degree,
        points=tuple(chosen),
        gaussian=gaussian,
        mismatch=mismatch,
        surplus=tuple(surplus),
        inconsistent=tuple(inconsistent),
    )


def reconstruct_record(
    record: Union[ShareRecord, Mapping[str, Any]],
    config: Optional[ReconstructionConfig] = None,
) -> ReconstructionResult:
    """Decode every share of *record* and reconstruct its secret.

    A share that fails to decode aborts the request.

    Raises:
        InvalidEncoding: If the record or any share value is malformed.
        InsufficientPoints: If the record holds fewer than ``k`` shares.
        DegenerateInput: If x-coordinates repeat.
    """
    if not isinstance(record, ShareRecord):
        record = parse_record(record)
    points = [decode_share(share) for share in record.shares]
    for share, point in zip(record.shares, points):
        logger.debug(
            "Share %d: %r (base %d) = %d",
            point.x, share.raw_value, share.base, point.y,
        )
    return reconstruct_points(points, record.degree, config)


def reconstruct_many(
    requests: Iterable[tuple[str, Union[ShareRecord, Mapping[str, Any]]]],
    config: Optional[ReconstructionConfig] = None,
) -> list[RequestOutcome]:
    """Process independent requests, isolating each one's failure.

    Args:
        requests: ``(name, record)`` pairs.
        config: Options shared by every request.

    Returns:
        One :class:`RequestOutcome` per request, in input order.
    """
    outcomes: list[RequestOutcome] = []
    for name, record in requests:
        outcome = RequestOutcome(name=name)
        try:
            if not isinstance(record, ShareRecord):
                record = parse_record(record)
            outcome.record = record
            outcome.result = reconstruct_record(record, config)
        except ReconstructionError as exc:
            logger.error("%s: %s: %s", name, type(exc).__name__, exc)
            outcome.error = exc
        else:
            logger.info("%s: secret = %d", name, outcome.result.secret)
        outcomes.append(outcome)
    return outcomes
