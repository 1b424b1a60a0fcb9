"""
Project scaffolding for `mcmod init`.

Writes a complete multi-loader project: base Gradle files, the common
module, each selected loader module, the dev run directory, CI, and
finally mcmod.toml.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from mcmod import templates
from mcmod.descriptor import save_descriptor
from mcmod.exceptions import McmodError, StateError
from mcmod.features import LOADER_FILE_WRITERS, add_ci_files
from mcmod.logging_config import logger
from mcmod.mutation.gradle import add_include_to_settings, set_gradle_property
from mcmod.paths import McmodPaths
from mcmod.schemas import (
    LOADER_NAMES,
    Features,
    GlobalPreferences,
    Loaders,
    ModInfo,
    ProjectDescriptor,
    Versions,
)
from mcmod.user_config import copy_options_to, parse_language, write_dev_datapack
from mcmod.utils import derive_class_name, validate_mod_id, validate_package, write_file

ICON_PLACEHOLDER = "Replace this file with your mod icon (icon.png)\n"


@dataclass
class InitOptions:
    """Resolved answers for a new project (prompting happens in the CLI)."""
    directory: Path
    mod_id: str
    mod_name: str
    package: str
    author: str
    description: str
    language: str = "java"
    loaders: List[str] = field(default_factory=lambda: list(LOADER_NAMES))
    ci: bool = True


def normalize_loaders(loaders: List[str]) -> List[str]:
    """
    Validate loader names and return them deduplicated in fixed order.

    Raises:
        McmodError: If the list is empty or names an unknown loader
    """
    requested = [loader.lower() for loader in loaders]
    unknown = [loader for loader in requested if loader not in LOADER_NAMES]
    if unknown:
        raise McmodError(
            f"Unknown loader: {unknown[0]}. Valid loaders: {', '.join(LOADER_NAMES)}"
        )
    ordered = [name for name in LOADER_NAMES if name in requested]
    if not ordered:
        raise McmodError("At least one loader must be selected")
    return ordered


def write_base_files(project_root: Path, variables: Dict[str, str], language: str) -> None:
    """Root build files, .gitignore, LICENSE and the Gradle wrapper properties."""
    write_file(project_root / "build.gradle", templates.load_template(templates.BUILD_GRADLE_ROOT))
    write_file(
        project_root / "settings.gradle",
        templates.render_template(templates.SETTINGS_GRADLE, variables),
    )
    write_file(
        project_root / "gradle.properties",
        templates.render_template(templates.GRADLE_PROPERTIES, variables),
    )
    if language == "kotlin":
        set_gradle_property(project_root, "mod_language", "kotlin")
        set_gradle_property(project_root, "kotlin_version", templates.KOTLIN_VERSION)

    write_file(project_root / ".gitignore", templates.load_template(templates.GITIGNORE))
    write_file(project_root / "LICENSE", templates.render_template(templates.LICENSE, variables))
    write_file(
        project_root / "gradle" / "wrapper" / "gradle-wrapper.properties",
        templates.load_template(templates.GRADLE_WRAPPER_PROPS),
    )


def write_common_module(project_root: Path, variables: Dict[str, str], language: str) -> None:
    paths = McmodPaths(project_root)
    write_file(
        paths.module_dir("common") / "build.gradle",
        templates.load_template(templates.COMMON_BUILD_GRADLE),
    )

    template = templates.COMMON_MOD_KT if language == "kotlin" else templates.COMMON_MOD_JAVA
    write_file(
        paths.source_file("common", language, variables["package_path"], variables["class_name"]),
        templates.render_template(template, variables),
    )
    write_file(
        paths.resources_dir("common") / "assets" / variables["mod_id"] / "icon.png.txt",
        ICON_PLACEHOLDER,
    )


def write_run_directory(project_root: Path, prefs: GlobalPreferences, mc_version: str,
                        warn: Optional[Callable[[str], None]] = None) -> None:
    """
    Seed run/ with options.txt and the dev-defaults data pack.

    Best effort: failures are reported through `warn` and never abort init.
    """
    try:
        copy_options_to(project_root / "run" / "options.txt", prefs)
    except OSError as e:
        message = f"Could not create options.txt: {e}"
        logger.warning(message)
        if warn:
            warn(message)

    try:
        write_dev_datapack(project_root, prefs, mc_version)
    except OSError as e:
        message = f"Could not create dev-defaults data pack: {e}"
        logger.warning(message)
        if warn:
            warn(message)


def init_project(
    options: InitOptions,
    versions: Optional[Versions] = None,
    prefs: Optional[GlobalPreferences] = None,
    warn: Optional[Callable[[str], None]] = None,
) -> ProjectDescriptor:
    """
    Generate a new project in options.directory.

    Args:
        options: Resolved project answers
        versions: Dependency versions (default: offline defaults)
        prefs: Global preferences for the run directory (default: built-in defaults)
        warn: Optional callback for non-fatal warnings

    Returns:
        The saved descriptor

    Raises:
        InvalidModIdError, InvalidPackageError, InvalidValueError: Bad input
        StateError: If the directory already holds an mcmod project
        McmodError: If no valid loader is selected
    """
    validate_mod_id(options.mod_id)
    validate_package(options.package)
    language = parse_language(options.language)
    loaders = normalize_loaders(options.loaders)
    versions = versions or Versions()
    prefs = prefs or GlobalPreferences()

    project_root = Path(options.directory)
    paths = McmodPaths(project_root)
    if paths.descriptor.exists():
        raise StateError(f"{paths.descriptor} already exists")

    project_root.mkdir(parents=True, exist_ok=True)
    logger.info(f"Creating project '{options.mod_id}' in {project_root}")

    variables = templates.build_vars(
        mod_id=options.mod_id,
        mod_name=options.mod_name,
        package=options.package,
        class_name=derive_class_name(options.mod_id),
        author=options.author,
        description=options.description,
        language=language,
        minecraft_version=versions.minecraft,
        fabric_loader_version=versions.fabric_loader,
        fabric_api_version=versions.fabric_api,
        neoforge_version=versions.neoforge,
        enabled_platforms=",".join(loaders),
    )

    write_base_files(project_root, variables, language)
    write_common_module(project_root, variables, language)

    for loader in loaders:
        LOADER_FILE_WRITERS[loader](project_root, variables, language)
        add_include_to_settings(project_root, loader)
        logger.debug(f"Created {loader}/ module")

    write_run_directory(project_root, prefs, versions.minecraft, warn=warn)

    if options.ci:
        add_ci_files(project_root, variables)

    descriptor = ProjectDescriptor(
        mod_info=ModInfo(
            mod_id=options.mod_id,
            mod_name=options.mod_name,
            package=options.package,
            author=options.author,
            description=options.description,
            language=language,
        ),
        loaders=Loaders(**{name: name in loaders for name in LOADER_NAMES}),
        features=Features(ci=options.ci),
        versions=versions,
    )
    save_descriptor(descriptor, project_root)

    logger.info(f"Project '{options.mod_id}' created")
    return descriptor
