"""
Configuration management for gas snapshots.

This module handles loading and managing configuration settings
for the snapshot store, the tolerance, and run-mode resolution.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .comparator import ToleranceConfig

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse an environment flag, returning None when it is not a boolean."""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return None


@dataclass
class SnapshotConfig:
    """Configuration for gas snapshots."""

    # Storage
    snapshot_dir: str = ".forge-snapshots/"
    file_suffix: str = ".snap"

    # Run mode
    check_env_var: str = "FORGE_SNAPSHOT_CHECK"

    # Comparison settings
    tolerance: Dict[str, int] = None

    # Cost of the snap_start/snap_end machinery itself
    calibration_overhead: int = 100

    def __post_init__(self):
        if self.tolerance is None:
            self.tolerance = {
                "numerator": 1,
                "denominator": 1000,
            }
        # Fail at load time so from_file can fall back to defaults
        self.get_tolerance()

        if isinstance(self.calibration_overhead, bool) or not isinstance(self.calibration_overhead, int):
            raise TypeError(
                f"calibration_overhead must be an integer, got {self.calibration_overhead!r}"
            )
        if self.calibration_overhead < 0:
            raise ValueError(
                f"calibration_overhead must be non-negative, got {self.calibration_overhead}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotConfig":
        """Create from dictionary."""
        return cls(**data)

    @classmethod
    def from_file(cls, config_path: Path) -> "SnapshotConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def get_snapshot_dir(self) -> Path:
        """Get snapshot directory as Path."""
        return Path(self.snapshot_dir)

    def get_tolerance(self) -> ToleranceConfig:
        """Build the tolerance, raising ValueError or TypeError if it is malformed."""
        if not isinstance(self.tolerance, dict):
            raise TypeError(f"tolerance must be a mapping, got {self.tolerance!r}")

        missing = {"numerator", "denominator"} - self.tolerance.keys()
        if missing:
            raise ValueError(f"tolerance is missing {', '.join(sorted(missing))}")

        for key in ("numerator", "denominator"):
            value = self.tolerance[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"tolerance {key} must be an integer, got {value!r}")

        return ToleranceConfig(
            numerator=self.tolerance["numerator"],
            denominator=self.tolerance["denominator"],
        )

    def resolve_check_mode(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        """Read the check-mode flag, defaulting to record mode.

        Never raises: an unset or unparseable flag means record mode.
        """
        if environ is None:
            environ = os.environ

        raw = environ.get(self.check_env_var)
        check = parse_bool(raw)
        if check is None:
            if raw is not None:
                logger.warning(
                    f"Ignoring {self.check_env_var}={raw!r}: not a boolean, using record mode"
                )
            return False
        return check


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or Path("gas_snapshot_config.json")
        self.config = SnapshotConfig.from_file(self.config_path)

    def get_config(self) -> SnapshotConfig:
        """Get the current configuration."""
        return self.config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values."""
        for key, value in kwargs.items():
            if hasattr(self.config, key):
                setattr(self.config, key, value)

    def save_config(self) -> None:
        """Save configuration to file."""
        self.config.save_to_file(self.config_path)
