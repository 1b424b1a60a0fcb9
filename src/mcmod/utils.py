"""
Naming and filesystem helpers shared by init, add and migration.
"""

import os
import re
import tempfile
from pathlib import Path

from mcmod.exceptions import InvalidModIdError, InvalidPackageError
from mcmod.logging_config import logger
from mcmod.schemas import MOD_ID_PATTERN, PACKAGE_PATTERN

_MOD_ID_RE = re.compile(MOD_ID_PATTERN)
_PACKAGE_RE = re.compile(PACKAGE_PATTERN)


def validate_mod_id(mod_id: str) -> None:
    """Raise InvalidModIdError unless mod_id matches ^[a-z][a-z0-9_]*$."""
    if not _MOD_ID_RE.fullmatch(mod_id):
        raise InvalidModIdError(mod_id)


def validate_package(package: str) -> None:
    """Raise InvalidPackageError unless every dot segment is a valid identifier."""
    if not _PACKAGE_RE.fullmatch(package):
        raise InvalidPackageError(package)


def to_pascal_case(value: str) -> str:
    """
    Convert snake_case to PascalCase.

    Examples:
        to_pascal_case("my_cool_mod")  # "MyCoolMod"
        to_pascal_case("a_b_c")        # "ABC"
    """
    return "".join(part[0].upper() + part[1:] for part in value.split("_") if part)


def package_to_path(package: str) -> str:
    """com.example.mymod -> com/example/mymod"""
    return package.replace(".", "/")


def derive_class_name(mod_id: str) -> str:
    """my_mod -> MyModMod, testmod -> TestmodMod"""
    return f"{to_pascal_case(mod_id)}Mod"


def default_mod_name(mod_id: str) -> str:
    """my_cool_mod -> My Cool Mod"""
    return " ".join(part[0].upper() + part[1:] for part in mod_id.split("_") if part)


def neoforge_major(version: str) -> str:
    """21.4.156 -> 21.4 (shorter strings pass through)."""
    parts = version.split(".", 2)
    if len(parts) >= 2:
        return f"{parts[0]}.{parts[1]}"
    return version


def write_file(path: Path, content: str) -> None:
    """Write text, creating parent directories as needed. Overwrites."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.debug(f"Wrote {path}")


def write_binary(path: Path, content: bytes) -> None:
    """Write bytes, creating parent directories as needed. Overwrites."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.debug(f"Wrote {path} ({len(content)} bytes)")


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write file atomically using temp file + rename.

    The temp file lives in the target directory so the rename stays on one
    filesystem. The temp file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        # mkstemp creates 0600; keep the mode of the file being replaced
        mode = path.stat().st_mode if path.exists() else 0o644
        os.chmod(temp_path, mode & 0o7777)
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
    logger.debug(f"Atomic write completed: {path}")
