"""
Tolerance comparison between a stored baseline and a new measurement.

The allowed deviation is a fixed fraction of the OLD value, so the baseline
is always the reference point.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ToleranceConfig:
    """Relative tolerance expressed as an integer ratio."""

    numerator: int = 1
    denominator: int = 1000

    def __post_init__(self):
        if self.numerator < 0 or self.denominator <= 0:
            raise ValueError(
                f"Invalid tolerance {self.numerator}/{self.denominator}"
            )


DEFAULT_TOLERANCE = ToleranceConfig()


@dataclass(frozen=True)
class MismatchInfo:
    """Both sides of a failed comparison."""

    old: int
    new: int
    delta: int
    allowed_delta: int


@dataclass
class ComparisonResult:
    """Result of comparing a measurement with its baseline."""

    match: bool
    old: int
    new: int
    delta: int
    allowed_delta: int
    error_message: Optional[str] = None


def allowed_delta(old: int, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> int:
    """Largest deviation from ``old`` still considered equivalent."""
    return old * tolerance.numerator // tolerance.denominator


def within_tolerance(old: int, new: int, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> bool:
    """Check whether ``new`` is within tolerance of ``old``."""
    delta = allowed_delta(old, tolerance)
    lower = old - delta if delta <= old else 0
    return lower <= new <= old + delta


def mismatch(old: int, new: int, tolerance: ToleranceConfig = DEFAULT_TOLERANCE) -> MismatchInfo:
    return MismatchInfo(old=old, new=new, delta=new - old, allowed_delta=allowed_delta(old, tolerance))


class Comparator:
    """Compares measurements against baselines with a relative tolerance."""

    def __init__(self, tolerance: Optional[ToleranceConfig] = None):
        self.tolerance = tolerance or DEFAULT_TOLERANCE

    def compare(self, old: int, new: int) -> ComparisonResult:
        """Compare a new measurement with the stored baseline."""
        allowed = allowed_delta(old, self.tolerance)

        if within_tolerance(old, new, self.tolerance):
            return ComparisonResult(
                match=True, old=old, new=new, delta=new - old, allowed_delta=allowed
            )

        info = mismatch(old, new, self.tolerance)
        return ComparisonResult(
            match=False,
            old=info.old,
            new=info.new,
            delta=info.delta,
            allowed_delta=info.allowed_delta,
            error_message=(
                f"Value {new} differs from snapshot {old} by {info.delta:+d}, "
                f"allowed ±{allowed}"
            ),
        )
