"""
Mutation package: in-place edits to generated projects.

Provides the idempotent text patches used on build files, the Java -> Kotlin
source migration, and the intent record that marks unfinished additions.
"""

from .editor import (
    TextPatcher,
    insert_unique_line,
    upsert_key,
    add_to_list_property,
)
from .gradle import (
    add_include_to_settings,
    add_platform_to_gradle_properties,
    set_gradle_property,
)
from .ledger import IntentLedger
from .migration import MarkerFile, MigrationResult, cleanup_empty_dirs, migrate_module

__all__ = [
    # Text primitives
    "TextPatcher",
    "insert_unique_line",
    "upsert_key",
    "add_to_list_property",

    # Gradle files
    "add_include_to_settings",
    "add_platform_to_gradle_properties",
    "set_gradle_property",

    # Migration
    "MarkerFile",
    "MigrationResult",
    "cleanup_empty_dirs",
    "migrate_module",

    # Crash marker
    "IntentLedger",
]
