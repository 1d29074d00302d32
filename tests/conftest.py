"""
Pytest configuration and shared fixtures for gas_snapshot tests.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from gas_snapshot.config import SnapshotConfig
from gas_snapshot.controller import GasSnapshot
from gas_snapshot.meter import ManualGasMeter
from gas_snapshot.storage import SnapshotStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def temp_snapshot_dir(temp_dir):
    """Path of a snapshot directory that does not exist yet."""
    return temp_dir / ".forge-snapshots"


@pytest.fixture
def store(temp_snapshot_dir):
    """Create a SnapshotStore in the temporary directory."""
    return SnapshotStore(temp_snapshot_dir)


@pytest.fixture
def meter():
    """A host-driven gas meter."""
    return ManualGasMeter(budget=1_000_000, read_cost=100)


@pytest.fixture
def config(temp_snapshot_dir):
    """Default configuration pointing at the temporary snapshot directory."""
    return SnapshotConfig(snapshot_dir=str(temp_snapshot_dir))


@pytest.fixture
def recorder(meter, config):
    """Controller in record mode."""
    return GasSnapshot(meter, config=config, check_mode=False)


@pytest.fixture
def checker(meter, config):
    """Controller in check mode."""
    return GasSnapshot(meter, config=config, check_mode=True)
