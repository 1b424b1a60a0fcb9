"""
Text templates for generated projects.

Templates are package data read through importlib.resources; placeholders
use the {{name}} form and are filled by `render`.
"""

import datetime
from functools import lru_cache
from importlib import resources
from typing import Dict

from mcmod.utils import neoforge_major, package_to_path

# Template names (paths relative to this package)
BUILD_GRADLE_ROOT = "build.gradle.root"
SETTINGS_GRADLE = "settings.gradle"
GRADLE_PROPERTIES = "gradle.properties"
GITIGNORE = "gitignore"
LICENSE = "LICENSE"
GRADLE_WRAPPER_PROPS = "wrapper/gradle-wrapper.properties"

COMMON_BUILD_GRADLE = "common/build.gradle"
COMMON_MOD_JAVA = "common/CommonMod.java"
COMMON_MOD_KT = "common/CommonMod.kt"

FABRIC_BUILD_GRADLE = "fabric/build.gradle"
FABRIC_GRADLE_PROPS = "fabric/gradle.properties"
FABRIC_MOD_JAVA = "fabric/FabricMod.java"
FABRIC_MOD_KT = "fabric/FabricMod.kt"
FABRIC_MOD_JSON = "fabric/fabric.mod.json"
FABRIC_MIXINS_JSON = "fabric/mixins.json"
FABRIC_MIXIN_PACKAGE_INFO = "fabric/mixin_package_info.java"

NEOFORGE_BUILD_GRADLE = "neoforge/build.gradle"
NEOFORGE_GRADLE_PROPS = "neoforge/gradle.properties"
NEOFORGE_MOD_JAVA = "neoforge/NeoForgeMod.java"
NEOFORGE_MOD_KT = "neoforge/NeoForgeMod.kt"
NEOFORGE_MODS_TOML = "neoforge/neoforge.mods.toml"

CI_BUILD_YML = "ci/build.yml"

# Kotlin toolchain pinned when a project is created or migrated as Kotlin
KOTLIN_VERSION = "2.1.0"


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    """Read a template shipped with the package."""
    resource = resources.files(__package__)
    for part in name.split("/"):
        resource = resource.joinpath(part)
    return resource.read_text(encoding="utf-8")


def render(template: str, variables: Dict[str, str]) -> str:
    """Replace every {{key}} occurrence with its value."""
    result = template
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", value)
    return result


def render_template(name: str, variables: Dict[str, str]) -> str:
    return render(load_template(name), variables)


def build_vars(
    mod_id: str,
    mod_name: str,
    package: str,
    class_name: str,
    author: str,
    description: str,
    language: str,
    minecraft_version: str,
    fabric_loader_version: str,
    fabric_api_version: str,
    neoforge_version: str,
    enabled_platforms: str,
) -> Dict[str, str]:
    """Build the standard set of template variables."""
    return {
        "mod_id": mod_id,
        "mod_name": mod_name,
        "package": package,
        "package_path": package_to_path(package),
        "class_name": class_name,
        "author": author,
        "description": description,
        "language": language,
        "minecraft_version": minecraft_version,
        "fabric_loader_version": fabric_loader_version,
        "fabric_api_version": fabric_api_version,
        "neoforge_version": neoforge_version,
        "neoforge_major": neoforge_major(neoforge_version),
        "year": str(datetime.date.today().year),
        "enabled_platforms": enabled_platforms,
    }
