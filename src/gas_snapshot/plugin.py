"""
pytest fixtures for gas snapshots.

Installed packages register this module through the ``pytest11`` entry point.
From a source checkout, enable it in a conftest.py with::

    pytest_plugins = ["gas_snapshot.plugin"]

Override ``gas_snapshot_config`` to point the store somewhere else.
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from .config import ConfigManager, SnapshotConfig
from .controller import GasSnapshot
from .meter import TraceGasMeter


@pytest.fixture
def gas_snapshot_config() -> SnapshotConfig:
    """Configuration loaded from gas_snapshot_config.json, or defaults."""
    return ConfigManager().get_config()


@pytest.fixture
def gas_meter(gas_snapshot_config: SnapshotConfig) -> Iterator[TraceGasMeter]:
    """A line-metering gas meter active for the duration of the test."""
    meter = TraceGasMeter(read_cost=gas_snapshot_config.calibration_overhead)
    with meter:
        yield meter


@pytest.fixture
def gas_snapshot(gas_meter: TraceGasMeter, gas_snapshot_config: SnapshotConfig) -> GasSnapshot:
    """Controller recording or checking snapshots for the current test."""
    return GasSnapshot(gas_meter, config=gas_snapshot_config)
