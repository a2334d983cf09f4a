"""Typed failures raised while decoding shares and reconstructing secrets."""

from __future__ import annotations


class ReconstructionError(ValueError):
    """Base class for every fatal reconstruction failure."""


class InvalidEncoding(ReconstructionError):
    """A share value, its base, or the surrounding record is malformed."""


class DegenerateInput(ReconstructionError):
    """Duplicate x-coordinates, a singular system or non-finite values."""


class InsufficientPoints(ReconstructionError):
    """Fewer usable points than the polynomial degree requires."""


class ReconstructionMismatch(UserWarning):
    """The exact and floating reconstructions disagree beyond tolerance.

    Emitted through :mod:`warnings`; the Lagrange value stays authoritative.
    """
