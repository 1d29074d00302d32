"""
Snapshot storage.

Each checkpoint maps to one file under the snapshot root holding the decimal
text of its last recorded value.
"""
from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

from .codec import decode, encode
from .exceptions import ParseError

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and writes single-value snapshot files."""

    def __init__(self, snapshot_dir: Path, suffix: str = ".snap"):
        self.snapshot_dir = Path(snapshot_dir)
        self.suffix = suffix
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        """Return the file path backing a checkpoint."""
        return self.snapshot_dir / f"{name}{self.suffix}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> Optional[int]:
        """Read the stored value for a checkpoint.

        Returns None when no snapshot has been written yet. Any other I/O
        failure, and a malformed file, raise.
        """
        snapshot_path = self.path_for(name)
        try:
            with open(snapshot_path, "rb") as f:
                raw = f.readline()
        except FileNotFoundError:
            return None

        try:
            line = raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise ParseError(raw.decode("ascii", "backslashreplace"), "non-ASCII content") from e

        return decode(line.rstrip("\r\n"))

    def write(self, name: str, value: int) -> Path:
        """Replace the stored value for a checkpoint."""
        snapshot_path = self.path_for(name)
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)

        content = encode(value)

        # Write beside the target so os.replace stays on one filesystem
        fd, tmp_name = tempfile.mkstemp(
            dir=snapshot_path.parent, prefix=f".{snapshot_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(content)
            # mkstemp creates 0600; keep the snapshot's mode or honour the umask
            os.chmod(tmp_name, self._file_mode(snapshot_path))
            os.replace(tmp_name, snapshot_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote {content} to {snapshot_path}")
        return snapshot_path

    @staticmethod
    def _file_mode(snapshot_path: Path) -> int:
        """Permission bits for a (re)written snapshot file."""
        try:
            return stat.S_IMODE(snapshot_path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
