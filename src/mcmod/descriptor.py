"""
Descriptor Store: persistence of mcmod.toml.

The store owns the file. Callers load a snapshot, mutate it in memory and
save it back wholesale once every dependent file edit has succeeded.
"""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from mcmod.exceptions import ConfigNotFoundError, SerializationError
from mcmod.logging_config import logger
from mcmod.paths import McmodPaths
from mcmod.schemas import ProjectDescriptor
from mcmod.utils import atomic_write_text


def dump_descriptor(descriptor: ProjectDescriptor) -> str:
    """
    Serialize a descriptor to TOML text.

    Output is deterministic (field order follows the model), so
    save(load(save(d))) is byte-for-byte stable.
    """
    try:
        return tomli_w.dumps(descriptor.model_dump(mode="json"))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"TOML serialization error: {e}") from e


def parse_descriptor(content: str) -> ProjectDescriptor:
    """Parse TOML text into a validated descriptor."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise SerializationError(f"TOML deserialization error: {e}") from e

    try:
        return ProjectDescriptor.model_validate(data)
    except PydanticValidationError as e:
        raise SerializationError(f"Invalid mcmod.toml: {e}") from e


def load_descriptor(project_root: Path) -> ProjectDescriptor:
    """
    Load mcmod.toml from a project directory.

    Raises:
        ConfigNotFoundError: If the descriptor file does not exist
        SerializationError: If it is not UTF-8, not valid TOML or fails validation
    """
    path = McmodPaths(project_root).descriptor
    if not path.exists():
        raise ConfigNotFoundError(path)

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SerializationError(f"mcmod.toml is not valid UTF-8: {e}") from e

    descriptor = parse_descriptor(content)
    logger.debug(f"Loaded descriptor from {path}")
    return descriptor


def save_descriptor(descriptor: ProjectDescriptor, project_root: Path) -> Path:
    """
    Overwrite mcmod.toml with the full descriptor.

    Returns:
        Path to the written file
    """
    path = McmodPaths(project_root).descriptor
    atomic_write_text(path, dump_descriptor(descriptor))
    logger.debug(f"Saved descriptor to {path}")
    return path
