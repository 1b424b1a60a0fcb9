"""
Executable replacement strategies for self-update.

A running executable cannot always be overwritten in place, so the
replacement method is chosen once per platform:

- RenameReplacer (POSIX): write a sibling temp file, chmod +x, then one
  atomic rename over the original. The path never disappears and never
  points at a half-written file.
- DisplaceReplacer (Windows): move the running exe aside to a backup,
  write the new exe at the original path, delete the backup. If the write
  fails the backup is renamed back before the error propagates.
"""

import os
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from mcmod.exceptions import UnsupportedPlatformError
from mcmod.logging_config import logger

# (system, machine) -> release asset name
ASSET_NAMES = {
    ("linux", "x86_64"): "mcmod-linux-x86_64",
    ("macos", "x86_64"): "mcmod-macos-x86_64",
    ("macos", "aarch64"): "mcmod-macos-aarch64",
    ("windows", "x86_64"): "mcmod-windows-x86_64.exe",
}

_SYSTEM_ALIASES = {"darwin": "macos"}
_MACHINE_ALIASES = {"amd64": "x86_64", "x64": "x86_64", "arm64": "aarch64"}


def current_platform():
    """This interpreter's (system, machine), normalized for ASSET_NAMES."""
    return normalize_platform(platform.system(), platform.machine())


def normalize_platform(system: str, machine: str):
    system = system.lower()
    machine = machine.lower()
    return _SYSTEM_ALIASES.get(system, system), _MACHINE_ALIASES.get(machine, machine)


def asset_name_for(system: str, machine: str) -> str:
    """
    Look up the release asset for a platform.

    Raises:
        UnsupportedPlatformError: If the combination has no published binary
    """
    key = normalize_platform(system, machine)
    if key not in ASSET_NAMES:
        raise UnsupportedPlatformError(system, machine)
    return ASSET_NAMES[key]


def sibling_path(path: Path, suffix: str) -> Path:
    """mcmod -> mcmod.new, mcmod.exe -> mcmod.exe.old"""
    return path.with_name(f"{path.name}.{suffix}")


class BinaryReplacer(ABC):
    """Replace the file at target with payload."""

    @abstractmethod
    def replace(self, target: Path, payload: bytes) -> None:
        ...


class RenameReplacer(BinaryReplacer):
    """Temp file + chmod + atomic rename."""

    TEMP_SUFFIX = "new"
    MODE = 0o755

    def temp_path(self, target: Path) -> Path:
        return sibling_path(target, self.TEMP_SUFFIX)

    def replace(self, target: Path, payload: bytes) -> None:
        target = Path(target)
        temp_path = self.temp_path(target)
        try:
            temp_path.write_bytes(payload)
            os.chmod(temp_path, self.MODE)
            os.replace(temp_path, target)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
        logger.info(f"Replaced {target} (atomic rename)")


class DisplaceReplacer(BinaryReplacer):
    """Move aside, write in place, roll back on write failure."""

    BACKUP_SUFFIX = "old"

    def backup_path(self, target: Path) -> Path:
        return sibling_path(target, self.BACKUP_SUFFIX)

    def _write_payload(self, target: Path, payload: bytes) -> None:
        target.write_bytes(payload)

    def replace(self, target: Path, payload: bytes) -> None:
        target = Path(target)
        backup = self.backup_path(target)

        # Leftover from an earlier attempt
        if backup.exists():
            try:
                backup.unlink()
            except OSError as e:
                logger.warning(f"Could not remove stale backup {backup}: {e}")

        os.replace(target, backup)

        try:
            self._write_payload(target, payload)
        except OSError:
            logger.warning(f"Writing {target} failed; restoring previous executable")
            if target.exists():
                target.unlink()
            os.replace(backup, target)
            raise

        try:
            backup.unlink()
        except OSError as e:
            # The old exe may still be mapped by this process; the next update clears it
            logger.warning(f"Could not remove backup {backup}: {e}")

        logger.info(f"Replaced {target} (displace and write)")


def select_replacer(os_name: Optional[str] = None) -> BinaryReplacer:
    """Pick the strategy for this platform ('nt' -> displace, else rename)."""
    os_name = os_name or os.name
    if os_name == "nt":
        return DisplaceReplacer()
    return RenameReplacer()
