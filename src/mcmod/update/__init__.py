"""
Self-update: check the latest release and replace the running binary.
"""

from .manifest import fetch_release_manifest, latest_version, asset_url, download_asset
from .replacer import (
    BinaryReplacer,
    RenameReplacer,
    DisplaceReplacer,
    asset_name_for,
    select_replacer,
)
from .updater import UpdateResult, current_executable, run_update

__all__ = [
    "fetch_release_manifest",
    "latest_version",
    "asset_url",
    "download_asset",
    "BinaryReplacer",
    "RenameReplacer",
    "DisplaceReplacer",
    "asset_name_for",
    "select_replacer",
    "UpdateResult",
    "current_executable",
    "run_update",
]
