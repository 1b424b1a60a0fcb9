"""
SourceMigrator: one-way Java -> Kotlin migration of generated sources.

Per module: delete the Java entry class, prune the directories it leaves
empty, write the Kotlin entry class, and (Fabric) make sure the mixin
package-info.java is still present in the Java tree.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from mcmod.logging_config import logger
from mcmod.paths import McmodPaths
from mcmod.templates import render_template
from mcmod.utils import write_file


@dataclass
class MarkerFile:
    """A Java-tree file another concern needs, regenerated if missing."""
    relative_path: str      # Relative to <module>/src/main/java
    template: str           # Template name


@dataclass
class MigrationResult:
    """What migrate_module did."""
    module: str
    removed_source: Optional[Path]
    removed_dirs: List[Path]
    written_source: Path
    written_marker: Optional[Path] = None


def cleanup_empty_dirs(start: Path, stop_at: Path) -> List[Path]:
    """
    Remove start and its ancestors while they are empty.

    Never removes stop_at itself, anything above it, or a non-empty
    directory. A start outside stop_at removes nothing.

    Returns:
        Directories removed, deepest first
    """
    start = Path(start).resolve()
    stop_at = Path(stop_at).resolve()
    removed = []

    if start == stop_at or not start.is_relative_to(stop_at):
        return removed

    current = start
    while current != stop_at and current.is_dir():
        if any(current.iterdir()):
            break
        current.rmdir()
        removed.append(current)
        logger.debug(f"Removed empty directory {current}")
        current = current.parent

    return removed


def migrate_module(
    project_root: Path,
    module: str,
    package_path: str,
    class_name: str,
    template: str,
    variables: Dict[str, str],
    marker: Optional[MarkerFile] = None,
) -> MigrationResult:
    """
    Migrate one module's entry class from Java to Kotlin.

    Args:
        project_root: Project root; directory pruning never goes above it
        module: Module directory (common, fabric, neoforge)
        package_path: Slash-separated package path of the entry class
        class_name: Entry class name (without extension)
        template: Kotlin template name
        variables: Template variables
        marker: Java-tree file to keep (written only if absent)

    Returns:
        MigrationResult describing the changes
    """
    paths = McmodPaths(project_root)

    java_path = paths.source_file(module, "java", package_path, class_name)
    removed_source = None
    removed_dirs: List[Path] = []
    if java_path.exists():
        java_path.unlink()
        removed_source = java_path
        logger.debug(f"Removed {java_path}")
        removed_dirs = cleanup_empty_dirs(java_path.parent, paths.project_root)

    kt_path = paths.source_file(module, "kotlin", package_path, class_name)
    write_file(kt_path, render_template(template, variables))

    written_marker = None
    if marker is not None:
        marker_path = paths.source_root(module, "java") / marker.relative_path
        if not marker_path.exists():
            write_file(marker_path, render_template(marker.template, variables))
            written_marker = marker_path

    logger.info(f"Migrated {module}/ to Kotlin")
    return MigrationResult(
        module=module,
        removed_source=removed_source,
        removed_dirs=removed_dirs,
        written_source=kt_path,
        written_marker=written_marker,
    )
