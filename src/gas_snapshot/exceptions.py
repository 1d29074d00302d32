"""
Exceptions raised while measuring, recording, and checking gas snapshots.

Every error aborts the current checkpoint and surfaces to the calling test.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class GasSnapshotError(Exception):
    """Base class for all gas snapshot errors."""


class ParseError(GasSnapshotError, ValueError):
    """A persisted numeral could not be decoded."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r} as an unsigned integer: {reason}")


class MissingBaselineError(GasSnapshotError):
    """Check mode found no stored snapshot for a checkpoint."""

    def __init__(self, name: str, path: Optional[Path] = None):
        self.name = name
        self.path = path
        location = f" at {path}" if path is not None else ""
        super().__init__(f"No snapshot to check against for '{name}'{location}")


class GasMismatch(GasSnapshotError, AssertionError):
    """A measured value is outside the tolerance of its baseline."""

    def __init__(self, name: str, old: int, new: int):
        self.name = name
        self.old = old
        self.new = new
        self.delta = new - old
        super().__init__(
            f"Gas mismatch for '{name}': snapshot={old}, measured={new}, delta={self.delta:+d}"
        )


class UnderflowError(GasSnapshotError, ArithmeticError):
    """A measurement would be negative, or snap_end was called without snap_start."""


class BracketInProgressError(GasSnapshotError, RuntimeError):
    """snap_start was called while another bracket was still open."""

    def __init__(self, active: str, requested: str):
        self.active = active
        self.requested = requested
        super().__init__(
            f"Cannot start '{requested}': bracket '{active}' has not been ended"
        )


class OutOfGasError(GasSnapshotError):
    """A gas meter ran out of budget."""
