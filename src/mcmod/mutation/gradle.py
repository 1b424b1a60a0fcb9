"""
Gradle build-file patches: settings.gradle includes and gradle.properties keys.
"""

from pathlib import Path

from mcmod.paths import McmodPaths
from .editor import TextPatcher

ENABLED_PLATFORMS_KEY = "enabled_platforms"


def include_line(module: str) -> str:
    return f'include("{module}")'


def add_include_to_settings(project_root: Path, module: str) -> bool:
    """
    Register a module in settings.gradle.

    Inserted after the last existing include(...) line, or before
    rootProject.name when there are none. No-op if already included.

    Returns:
        True if settings.gradle changed
    """
    return TextPatcher().insert_unique_line(
        McmodPaths(project_root).settings_gradle,
        include_line(module),
        after_prefix="include(",
        before_prefix="rootProject.name",
    )


def add_platform_to_gradle_properties(project_root: Path, platform: str) -> bool:
    """Add a loader to the comma-separated enabled_platforms property."""
    return TextPatcher().add_to_list_property(
        McmodPaths(project_root).gradle_properties, ENABLED_PLATFORMS_KEY, platform
    )


def set_gradle_property(project_root: Path, key: str, value: str) -> bool:
    """Set or add a property in gradle.properties (re-enables a commented-out key)."""
    return TextPatcher().upsert_key(McmodPaths(project_root).gradle_properties, key, value)
