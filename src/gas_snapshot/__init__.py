"""
Gas usage snapshots for smart-contract test suites.

This package measures gas used by named checkpoints and either records it
as a baseline or checks it against the recorded baseline within a 0.1%
tolerance, failing the test on a regression.
"""

import logging
import sys

__version__ = "0.1.0"

# Configure logging for the package
def configure_logging(level=logging.INFO):
    """Configure logging for the gas_snapshot package."""
    # Configure the package-level logger
    logger = logging.getLogger('gas_snapshot')

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)

    return logger

# Configure logging by default
configure_logging()

# Import main classes for public API
from .codec import as_metric, decode, encode
from .comparator import Comparator, ComparisonResult, MismatchInfo, ToleranceConfig, within_tolerance
from .config import ConfigManager, SnapshotConfig
from .controller import GasSnapshot
from .exceptions import (
    BracketInProgressError,
    GasMismatch,
    GasSnapshotError,
    MissingBaselineError,
    OutOfGasError,
    ParseError,
    UnderflowError,
)
from .meter import GasMeter, ManualGasMeter, TraceGasMeter
from .storage import SnapshotStore

__all__ = [
    # Version
    "__version__",
    "configure_logging",
    # Codec
    "as_metric",
    "decode",
    "encode",
    # Storage
    "SnapshotStore",
    # Comparator
    "Comparator",
    "ComparisonResult",
    "MismatchInfo",
    "ToleranceConfig",
    "within_tolerance",
    # Config
    "ConfigManager",
    "SnapshotConfig",
    # Controller
    "GasSnapshot",
    # Meters
    "GasMeter",
    "ManualGasMeter",
    "TraceGasMeter",
    # Errors
    "GasSnapshotError",
    "ParseError",
    "MissingBaselineError",
    "GasMismatch",
    "UnderflowError",
    "BracketInProgressError",
    "OutOfGasError",
]
