"""
Self-update orchestration.

1. current version        5. asset URL from the manifest (exact name)
2. latest release tag     6. download
3. stop if up to date     7. replace the running executable
4. platform asset name
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from mcmod.exceptions import McmodError
from mcmod.logging_config import logger
from mcmod.schemas import ReleaseManifest
from .manifest import asset_url, download_asset, fetch_release_manifest, latest_version
from .replacer import BinaryReplacer, asset_name_for, current_platform, select_replacer


@dataclass
class UpdateResult:
    """Outcome of run_update."""
    current: str
    latest: str
    up_to_date: bool
    asset: Optional[str] = None
    executable: Optional[Path] = None


def current_executable() -> Path:
    """
    Path of the running mcmod binary.

    Only standalone (frozen) builds can replace themselves; a pip install
    is upgraded through pip.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    raise McmodError(
        "Self-update only works for the standalone mcmod binary. "
        "Upgrade a pip installation with 'pip install -U mcmod'."
    )


def run_update(
    current_version: str,
    fetch_manifest: Callable[[], ReleaseManifest] = fetch_release_manifest,
    download: Callable[[str], bytes] = download_asset,
    executable: Optional[Callable[[], Path]] = None,
    replacer: Optional[BinaryReplacer] = None,
    system: Optional[str] = None,
    machine: Optional[str] = None,
    on_progress: Optional[Callable[[str], None]] = None,
) -> UpdateResult:
    """
    Update the running executable to the latest release.

    Args:
        current_version: Version of the running CLI
        fetch_manifest: Returns the latest release record
        download: Downloads an asset URL to bytes
        executable: Returns the path to replace (default: current_executable)
        replacer: Replacement strategy (default: select_replacer())
        system, machine: Platform override (default: this machine)
        on_progress: Called with human-readable progress messages

    Returns:
        UpdateResult
    """
    progress = on_progress or (lambda message: None)

    manifest = fetch_manifest()
    latest = latest_version(manifest)
    logger.info(f"Current version {current_version}, latest {latest}")

    if latest == current_version:
        return UpdateResult(current=current_version, latest=latest, up_to_date=True)

    progress(f"New version available: v{latest}")

    if system is None or machine is None:
        system, machine = current_platform()
    asset = asset_name_for(system, machine)
    url = asset_url(manifest, asset)

    # Resolve the target before downloading so a pip install fails fast
    target = (executable or current_executable)()

    progress(f"Downloading {asset}...")
    payload = download(url)

    (replacer or select_replacer()).replace(target, payload)
    logger.info(f"Updated {target} to v{latest}")

    return UpdateResult(
        current=current_version,
        latest=latest,
        up_to_date=False,
        asset=asset,
        executable=target,
    )
