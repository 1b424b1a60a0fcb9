"""
mcmod Path Configuration

Centralized path management for a generated project and for the
user-scope configuration directory.

Project layout (relative to the project root):
mcmod.toml               # Project descriptor
settings.gradle          # Build-include list
gradle.properties        # Key/value build properties
.mcmod/
└── intent.json          # In-flight feature addition (removed on success)
<module>/src/main/<java|kotlin>/<package path>/<Class>.<java|kt>
"""

import os
from pathlib import Path
from typing import Optional


SOURCE_EXTENSIONS = {"java": "java", "kotlin": "kt"}


def global_config_dir() -> Path:
    """
    Returns the platform-specific global config directory for mcmod.

    - Windows: %APPDATA%/mcmod
    - Linux/macOS: $XDG_CONFIG_HOME/mcmod
    - Fallback: ~/.config/mcmod
    """
    if os.name == "nt":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / "mcmod"
    else:
        xdg = os.getenv("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg) / "mcmod"

    return Path.home() / ".config" / "mcmod"


class McmodPaths:
    """
    Path configuration for one generated project.

    Default project_root is the current working directory.
    """

    DESCRIPTOR_NAME = "mcmod.toml"
    SETTINGS_GRADLE_NAME = "settings.gradle"
    GRADLE_PROPERTIES_NAME = "gradle.properties"

    STATE_DIR = ".mcmod"
    INTENT_NAME = "intent.json"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = Path(project_root) if project_root is not None else None

    @property
    def project_root(self) -> Path:
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def descriptor(self) -> Path:
        return self.project_root / self.DESCRIPTOR_NAME

    @property
    def settings_gradle(self) -> Path:
        return self.project_root / self.SETTINGS_GRADLE_NAME

    @property
    def gradle_properties(self) -> Path:
        return self.project_root / self.GRADLE_PROPERTIES_NAME

    @property
    def state_dir(self) -> Path:
        return self.project_root / self.STATE_DIR

    @property
    def intent_file(self) -> Path:
        return self.state_dir / self.INTENT_NAME

    def module_dir(self, module: str) -> Path:
        return self.project_root / module

    def source_root(self, module: str, language: str) -> Path:
        """Get <module>/src/main/<language>."""
        return self.module_dir(module) / "src" / "main" / language

    def source_file(self, module: str, language: str, package_path: str, class_name: str) -> Path:
        """
        Get the path of a module's top-level source file.

        Args:
            module: Module directory name (common, fabric, neoforge)
            language: "java" or "kotlin"
            package_path: Slash-separated package path
            class_name: Class identifier without extension
        """
        ext = SOURCE_EXTENSIONS[language]
        return self.source_root(module, language) / package_path / f"{class_name}.{ext}"

    def resources_dir(self, module: str) -> Path:
        return self.module_dir(module) / "src" / "main" / "resources"
