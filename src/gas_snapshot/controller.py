"""
Gas snapshot controller.

Measures named checkpoints and, depending on the run mode, records them as
baselines or checks them against the stored baselines.

Record mode writes a value only when there is no baseline yet or the new
value is outside tolerance, so insignificant fluctuations never touch the
snapshot files. Check mode never writes and fails on a missing baseline or
an out-of-tolerance value.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional, Union

from .codec import as_metric
from .comparator import Comparator
from .config import SnapshotConfig
from .exceptions import BracketInProgressError, GasMismatch, MissingBaselineError, UnderflowError
from .meter import GasMeter
from .storage import SnapshotStore

logger = logging.getLogger(__name__)

SizeTarget = Union[int, bytes, bytearray, memoryview, str]


@dataclass(frozen=True)
class _Bracket:
    """An open snap_start/snap_end window."""

    name: str
    start_gas: int


class GasSnapshot:
    """Records or checks gas usage for named checkpoints."""

    def __init__(
        self,
        meter: GasMeter,
        config: Optional[SnapshotConfig] = None,
        store: Optional[SnapshotStore] = None,
        check_mode: Optional[bool] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the controller.

        Args:
            meter: Source of the remaining-gas counter.
            config: Snapshot configuration, defaults to ``SnapshotConfig()``.
            store: Snapshot store, defaults to one rooted at ``config.snapshot_dir``.
            check_mode: Run mode; when None it is read from the environment.
            environ: Environment used to resolve the run mode, defaults to os.environ.
        """
        self.meter = meter
        self.config = config or SnapshotConfig()
        self.store = store or SnapshotStore(
            self.config.get_snapshot_dir(), suffix=self.config.file_suffix
        )
        self.comparator = Comparator(self.config.get_tolerance())
        self.calibration_overhead = self.config.calibration_overhead

        if check_mode is None:
            check_mode = self.config.resolve_check_mode(environ)
        self.check_mode = bool(check_mode)

        self._bracket: Optional[_Bracket] = None

        logger.debug(
            f"Gas snapshots in {self.store.snapshot_dir} "
            f"({'check' if self.check_mode else 'record'} mode)"
        )

    def set_check_mode(self, check: bool) -> None:
        """Switch between check mode (True) and record mode (False)."""
        self.check_mode = bool(check)

    @property
    def in_flight(self) -> Optional[str]:
        """Name of the open bracket, if any."""
        return self._bracket.name if self._bracket else None

    def snap_value(self, name: str, value: Any) -> int:
        """Record or check a value measured by the caller."""
        measured = as_metric(value)
        self._dispatch(name, measured)
        return measured

    def snap_closure(self, name: str, closure: Callable[[], Any]) -> int:
        """Measure the gas consumed by a single call of ``closure``."""
        gas_before = self.meter.gas_left()
        closure()
        gas_after = self.meter.gas_left()

        gas_used = gas_before - gas_after
        if gas_used < 0:
            raise UnderflowError(
                f"Remaining gas increased across '{name}': {gas_before} -> {gas_after}"
            )

        self._dispatch(name, gas_used)
        return gas_used

    def snap_start(self, name: str) -> None:
        """Open a measurement bracket for ``name``."""
        if self._bracket is not None:
            raise BracketInProgressError(self._bracket.name, name)
        self._bracket = _Bracket(name=name, start_gas=self.meter.gas_left())

    def snap_end(self) -> int:
        """Close the open bracket and record or check its gas usage."""
        bracket = self._bracket
        if bracket is None:
            raise UnderflowError("snap_end called without a matching snap_start")

        self._bracket = None
        gas_now = self.meter.gas_left()

        gas_used = bracket.start_gas - gas_now - self.calibration_overhead
        if gas_used < 0:
            raise UnderflowError(
                f"Negative gas for '{bracket.name}': start={bracket.start_gas}, "
                f"end={gas_now}, overhead={self.calibration_overhead}"
            )

        self._dispatch(bracket.name, gas_used)
        return gas_used

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """Bracket the body of a ``with`` block.

        If the body raises, the bracket is discarded and nothing is recorded.
        """
        self.snap_start(name)
        try:
            yield
        except BaseException:
            self._bracket = None
            raise
        self.snap_end()

    def snap_size(self, name: str, target: SizeTarget) -> int:
        """Record or check the byte size of deployed code.

        ``target`` is a byte length, the code itself, or its 0x-prefixed hex.
        """
        if isinstance(target, str):
            hex_code = target[2:] if target[:2] in ("0x", "0X") else target
            size = len(bytes.fromhex(hex_code))
        elif isinstance(target, (bytes, bytearray, memoryview)):
            size = memoryview(target).nbytes
        else:
            size = as_metric(target)

        self._dispatch(name, size)
        return size

    def check_snapshot(self, name: str, measured: int) -> None:
        """Fail unless ``measured`` is within tolerance of the stored value."""
        old = self.store.read(name)
        if old is None:
            logger.error(f"No snapshot for '{name}'")
            raise MissingBaselineError(name, self.store.path_for(name))

        comparison = self.comparator.compare(old, measured)
        if not comparison.match:
            logger.error(f"'{name}': {comparison.error_message}")
            raise GasMismatch(name, old, measured)

        logger.debug(f"'{name}': {measured} matches snapshot {old}")

    def record_snapshot(self, name: str, measured: int) -> None:
        """Persist ``measured`` unless it is within tolerance of the stored value."""
        old = self.store.read(name)
        if old is None:
            self.store.write(name, measured)
            logger.info(f"Recorded new snapshot '{name}': {measured}")
            return

        comparison = self.comparator.compare(old, measured)
        if comparison.match:
            logger.debug(f"'{name}': {measured} within tolerance of {old}, not rewriting")
            return

        self.store.write(name, measured)
        logger.info(f"Updated snapshot '{name}': {old} -> {measured} ({comparison.delta:+d})")

    def _dispatch(self, name: str, measured: int) -> None:
        if self.check_mode:
            self.check_snapshot(name, measured)
        else:
            self.record_snapshot(name, measured)
