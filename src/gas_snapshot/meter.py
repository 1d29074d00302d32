"""
Gas meters: sources of the "remaining budget" counter.

A meter reports how much execution budget is left. Reading it costs a small
constant amount (``read_cost``) that is already deducted from the value
returned, which is what the controller's calibration overhead offsets.

``ManualGasMeter`` is driven by the host (an EVM, a node, a test double).
``TraceGasMeter`` meters Python code directly using sys.settrace, charging
a fixed cost per executed line.
"""
from __future__ import annotations

import sys
import types
from collections.abc import Callable
from typing import Any, Optional, Protocol, runtime_checkable

from .exceptions import OutOfGasError

DEFAULT_BUDGET = 30_000_000
DEFAULT_READ_COST = 100


@runtime_checkable
class GasMeter(Protocol):
    """Anything that can report the remaining execution budget."""

    def gas_left(self) -> int:
        ...


class ManualGasMeter:
    """Meter whose consumption is reported explicitly by the host."""

    def __init__(self, budget: int = DEFAULT_BUDGET, read_cost: int = DEFAULT_READ_COST):
        if budget < 0 or read_cost < 0:
            raise ValueError("budget and read_cost must be non-negative")
        self.budget = budget
        self.read_cost = read_cost
        self.consumed = 0

    def consume(self, amount: int) -> None:
        """Charge ``amount`` units against the budget."""
        if amount < 0:
            raise ValueError(f"Cannot consume a negative amount: {amount}")
        self.consumed += amount

    def gas_left(self) -> int:
        self.consume(self.read_cost)
        if self.consumed > self.budget:
            raise OutOfGasError(
                f"Budget of {self.budget} exhausted ({self.consumed} consumed)"
            )
        return self.budget - self.consumed


class TraceGasMeter:
    """Meters executed Python lines while active.

    Use as a context manager. Frames from the standard library, pytest,
    and this package are not charged.
    """

    def __init__(
        self,
        budget: int = DEFAULT_BUDGET,
        gas_per_line: int = 1,
        read_cost: int = DEFAULT_READ_COST,
        excluded_modules: Optional[set[str]] = None,
    ):
        if budget < 0 or gas_per_line < 0 or read_cost < 0:
            raise ValueError("budget, gas_per_line and read_cost must be non-negative")
        self.budget = budget
        self.gas_per_line = gas_per_line
        self.read_cost = read_cost
        self.consumed = 0
        self.active = False
        self._previous_trace: Optional[Callable] = None

        self.excluded_modules = {
            "gas_snapshot",
            "pytest",
            "_pytest",
            "pluggy",
            "numpy",
        }
        if excluded_modules:
            self.excluded_modules |= set(excluded_modules)

    def __enter__(self) -> "TraceGasMeter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start charging executed lines."""
        if self.active:
            return
        self._previous_trace = sys.gettrace()
        self.active = True
        sys.settrace(self._trace_calls)

    def stop(self) -> None:
        """Stop charging and restore the previous trace function."""
        if not self.active:
            return
        sys.settrace(self._previous_trace)
        self._previous_trace = None
        self.active = False

    def gas_left(self) -> int:
        self.consumed += self.read_cost
        if self.consumed > self.budget:
            raise OutOfGasError(
                f"Budget of {self.budget} exhausted ({self.consumed} consumed)"
            )
        return self.budget - self.consumed

    def _trace_calls(self, frame: types.FrameType, event: str, arg: Any) -> Optional[Callable]:
        if not self.active:
            return None

        if event == "call":
            return self._trace_calls if self._should_meter_frame(frame) else None
        if event == "line":
            # Must not raise: overdraft is reported by the next gas_left()
            self.consumed += self.gas_per_line

        return self._trace_calls

    def _should_meter_frame(self, frame: types.FrameType) -> bool:
        module_name = frame.f_globals.get("__name__")
        if not module_name:
            return False

        if any(module_name == excluded or module_name.startswith(excluded + ".") for excluded in self.excluded_modules):
            return False

        top_level = module_name.split(".")[0]
        if top_level in sys.stdlib_module_names:
            return False

        return True
