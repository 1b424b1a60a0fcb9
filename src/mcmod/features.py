"""
Feature additions for an existing project.

Every feature follows the same order:
1. load the descriptor and refuse if the feature is already enabled
2. derive template variables from the descriptor
3. write the feature's files
4. (loaders) register the module in settings.gradle and enabled_platforms
5. flip the flag and save the descriptor

The descriptor is written last, so it is the record of what completed.
Steps 3-4 are not transactional: a failure leaves the files written so far
on disk and the flag unset. Re-running the same add overwrites those files;
the gradle patches are idempotent. `.mcmod/intent.json` marks a run that
has started but not yet saved the descriptor.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List

from mcmod import templates
from mcmod.descriptor import load_descriptor, save_descriptor
from mcmod.exceptions import AlreadyEnabledError, McmodError, NotEnabledError
from mcmod.logging_config import logger
from mcmod.mutation.gradle import (
    add_include_to_settings,
    add_platform_to_gradle_properties,
    set_gradle_property,
)
from mcmod.mutation.ledger import IntentLedger
from mcmod.mutation.migration import MarkerFile, MigrationResult, migrate_module
from mcmod.paths import McmodPaths
from mcmod.schemas import ProjectDescriptor
from mcmod.utils import derive_class_name, package_to_path, write_file

VALID_FEATURES = ("fabric", "neoforge", "ci", "kotlin")

MIXIN_PACKAGE_INFO = "mixin/package-info.java"


@dataclass(frozen=True)
class LoaderModule:
    """Static description of a loader module."""
    name: str
    class_suffix: str
    java_template: str
    kotlin_template: str
    needs_mixin_marker: bool = False

    def package_path(self, base_package_path: str) -> str:
        return f"{base_package_path}/{self.name}"

    def class_name(self, base_class_name: str) -> str:
        return f"{base_class_name}{self.class_suffix}"


LOADER_MODULES = {
    "fabric": LoaderModule(
        name="fabric",
        class_suffix="Fabric",
        java_template=templates.FABRIC_MOD_JAVA,
        kotlin_template=templates.FABRIC_MOD_KT,
        needs_mixin_marker=True,
    ),
    "neoforge": LoaderModule(
        name="neoforge",
        class_suffix="NeoForge",
        java_template=templates.NEOFORGE_MOD_JAVA,
        kotlin_template=templates.NEOFORGE_MOD_KT,
    ),
}


def build_vars(descriptor: ProjectDescriptor) -> Dict[str, str]:
    """Template variables for an existing project."""
    info = descriptor.mod_info
    versions = descriptor.versions
    return templates.build_vars(
        mod_id=info.mod_id,
        mod_name=info.mod_name,
        package=info.package,
        class_name=derive_class_name(info.mod_id),
        author=info.author,
        description=info.description,
        language=info.language,
        minecraft_version=versions.minecraft,
        fabric_loader_version=versions.fabric_loader,
        fabric_api_version=versions.fabric_api,
        neoforge_version=versions.neoforge,
        enabled_platforms=",".join(descriptor.enabled_platforms()),
    )


# ---------------------------------------------------------------------------
# File creation (shared with `mcmod init`)
# ---------------------------------------------------------------------------

def _write_loader_source(project_root: Path, loader: LoaderModule,
                         variables: Dict[str, str], language: str) -> Path:
    template = loader.kotlin_template if language == "kotlin" else loader.java_template
    path = McmodPaths(project_root).source_file(
        loader.name,
        language,
        loader.package_path(variables["package_path"]),
        loader.class_name(variables["class_name"]),
    )
    write_file(path, templates.render_template(template, variables))
    return path


def add_fabric_files(project_root: Path, variables: Dict[str, str], language: str) -> None:
    """Create the fabric/ module."""
    paths = McmodPaths(project_root)
    module_dir = paths.module_dir("fabric")
    resources = paths.resources_dir("fabric")

    write_file(module_dir / "build.gradle", templates.load_template(templates.FABRIC_BUILD_GRADLE))
    write_file(module_dir / "gradle.properties", templates.load_template(templates.FABRIC_GRADLE_PROPS))
    _write_loader_source(project_root, LOADER_MODULES["fabric"], variables, language)
    write_file(
        resources / "fabric.mod.json",
        templates.render_template(templates.FABRIC_MOD_JSON, variables),
    )
    write_file(
        resources / f"{variables['mod_id']}.mixins.json",
        templates.render_template(templates.FABRIC_MIXINS_JSON, variables),
    )
    # Mixins always live in the Java tree, even for Kotlin projects
    write_file(
        paths.source_root("fabric", "java") / variables["package_path"] / MIXIN_PACKAGE_INFO,
        templates.render_template(templates.FABRIC_MIXIN_PACKAGE_INFO, variables),
    )


def add_neoforge_files(project_root: Path, variables: Dict[str, str], language: str) -> None:
    """Create the neoforge/ module."""
    paths = McmodPaths(project_root)
    module_dir = paths.module_dir("neoforge")

    write_file(module_dir / "build.gradle", templates.load_template(templates.NEOFORGE_BUILD_GRADLE))
    write_file(module_dir / "gradle.properties", templates.load_template(templates.NEOFORGE_GRADLE_PROPS))
    _write_loader_source(project_root, LOADER_MODULES["neoforge"], variables, language)
    write_file(
        paths.resources_dir("neoforge") / "META-INF" / "neoforge.mods.toml",
        templates.render_template(templates.NEOFORGE_MODS_TOML, variables),
    )


def add_ci_files(project_root: Path, variables: Dict[str, str]) -> None:
    """Create the GitHub Actions workflow."""
    write_file(
        Path(project_root) / ".github" / "workflows" / "build.yml",
        templates.render_template(templates.CI_BUILD_YML, variables),
    )


LOADER_FILE_WRITERS: Dict[str, Callable[[Path, Dict[str, str], str], None]] = {
    "fabric": add_fabric_files,
    "neoforge": add_neoforge_files,
}


# ---------------------------------------------------------------------------
# Feature handlers
# ---------------------------------------------------------------------------

def add_loader(project_root: Path, loader: str) -> ProjectDescriptor:
    """Add a loader module (fabric or neoforge) to a project."""
    descriptor = load_descriptor(project_root)
    if getattr(descriptor.loaders, loader):
        raise AlreadyEnabledError(loader)

    variables = build_vars(descriptor)

    ledger = IntentLedger(project_root)
    ledger.begin(loader)

    LOADER_FILE_WRITERS[loader](project_root, variables, descriptor.mod_info.language)
    ledger.record_step("files")

    add_include_to_settings(project_root, loader)
    ledger.record_step("settings.gradle")

    add_platform_to_gradle_properties(project_root, loader)
    ledger.record_step("gradle.properties")

    setattr(descriptor.loaders, loader, True)
    save_descriptor(descriptor, project_root)
    ledger.complete()

    logger.info(f"Added {loader} module to {project_root}")
    return descriptor


def add_ci(project_root: Path) -> ProjectDescriptor:
    """Add the CI workflow to a project."""
    descriptor = load_descriptor(project_root)
    if descriptor.features.ci:
        raise AlreadyEnabledError("ci")

    variables = build_vars(descriptor)

    ledger = IntentLedger(project_root)
    ledger.begin("ci")

    add_ci_files(project_root, variables)
    ledger.record_step("files")

    descriptor.features.ci = True
    save_descriptor(descriptor, project_root)
    ledger.complete()

    logger.info(f"Added CI workflow to {project_root}")
    return descriptor


def migrate_loader_module(project_root: Path, descriptor: ProjectDescriptor, loader: str,
                          variables: Dict[str, str]) -> MigrationResult:
    """Migrate one enabled loader module's entry class to Kotlin."""
    if not getattr(descriptor.loaders, loader):
        raise NotEnabledError(loader)

    module = LOADER_MODULES[loader]
    base_package_path = package_to_path(descriptor.mod_info.package)
    marker = None
    if module.needs_mixin_marker:
        marker = MarkerFile(
            relative_path=f"{base_package_path}/{MIXIN_PACKAGE_INFO}",
            template=templates.FABRIC_MIXIN_PACKAGE_INFO,
        )

    return migrate_module(
        project_root,
        module.name,
        module.package_path(base_package_path),
        module.class_name(derive_class_name(descriptor.mod_info.mod_id)),
        module.kotlin_template,
        variables,
        marker=marker,
    )


def migrate_to_kotlin(project_root: Path) -> ProjectDescriptor:
    """
    Switch a Java project to Kotlin.

    Migrates common/ and every enabled loader module, then sets the
    language properties in gradle.properties. Loader and feature flags
    are left as they are.
    """
    descriptor = load_descriptor(project_root)
    if descriptor.mod_info.language == "kotlin":
        raise AlreadyEnabledError("kotlin")

    variables = build_vars(descriptor)

    ledger = IntentLedger(project_root)
    ledger.begin("kotlin")

    results: List[MigrationResult] = [
        migrate_module(
            project_root,
            "common",
            package_to_path(descriptor.mod_info.package),
            derive_class_name(descriptor.mod_info.mod_id),
            templates.COMMON_MOD_KT,
            variables,
        )
    ]
    ledger.record_step("common")

    for loader in descriptor.enabled_platforms():
        results.append(migrate_loader_module(project_root, descriptor, loader, variables))
        ledger.record_step(loader)

    set_gradle_property(project_root, "mod_language", "kotlin")
    set_gradle_property(project_root, "kotlin_version", templates.KOTLIN_VERSION)
    ledger.record_step("gradle.properties")

    descriptor.mod_info.language = "kotlin"
    save_descriptor(descriptor, project_root)
    ledger.complete()

    logger.info(f"Migrated {len(results)} module(s) to Kotlin")
    return descriptor


FEATURE_HANDLERS: Dict[str, Callable[[Path], ProjectDescriptor]] = {
    "fabric": lambda root: add_loader(root, "fabric"),
    "neoforge": lambda root: add_loader(root, "neoforge"),
    "ci": add_ci,
    "kotlin": migrate_to_kotlin,
}


def add_feature(name: str, project_root: Path) -> ProjectDescriptor:
    """
    Add a feature to the project at project_root.

    Args:
        name: One of fabric, neoforge, ci, kotlin
        project_root: Directory containing mcmod.toml

    Returns:
        The saved descriptor

    Raises:
        AlreadyEnabledError: If the feature is already enabled (nothing is touched)
        ConfigNotFoundError: If project_root has no mcmod.toml
        McmodError: If the feature name is unknown
    """
    handler = FEATURE_HANDLERS.get(name)
    if handler is None:
        raise McmodError(
            f"Unknown feature: {name}. Valid features: {', '.join(VALID_FEATURES)}"
        )
    return handler(Path(project_root))
