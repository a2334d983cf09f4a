"""Reconstruction configuration for share recovery runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SUBSET_POLICIES = ("first", "smallest")


@dataclass
class ReconstructionConfig:
    """Central configuration for a reconstruction request.

    Attributes:
        subset_policy: Which ``degree + 1`` points take part in the
            interpolation when more are supplied.  ``"first"`` keeps the
            input order, ``"smallest"`` picks the smallest x-values.
        rel_tolerance: Relative tolerance for the agreement between the
            exact Lagrange secret and the floating elimination estimate.
        abs_tolerance: Absolute tolerance for the same comparison.
        cross_check: Run the Gaussian-elimination path as a cross-check.
        verify_surplus: Check that points outside the chosen subset lie
            on the reconstructed polynomial.
        prime: Optional prime modulus.  When set the Lagrange path works
            in GF(prime) and the floating cross-check is skipped.
    """

    subset_policy: str = "first"
    rel_tolerance: float = 1e-9
    abs_tolerance: float = 1e-6
    cross_check: bool = True
    verify_surplus: bool = True
    prime: Optional[int] = None

    def __post_init__(self) -> None:
        if self.subset_policy not in SUBSET_POLICIES:
            raise ValueError(
                f"subset_policy must be one of {SUBSET_POLICIES}, "
                f"got {self.subset_policy!r}"
            )
        if self.rel_tolerance < 0 or self.abs_tolerance < 0:
            raise ValueError("tolerances must be >= 0")
        if self.prime is not None and self.prime < 2:
            raise ValueError("prime must be >= 2")
