"""
Release manifest access for self-update.

Reads the GitHub "latest release" record and downloads release assets.
"""

from typing import Any, Dict

import requests
from pydantic import ValidationError as PydanticValidationError

from mcmod.exceptions import McmodError, NetworkError
from mcmod.logging_config import logger
from mcmod.schemas import ReleaseManifest

RELEASES_URL = "https://api.github.com/repos/jhughes-dev/Minecraft-Mod-Starter/releases/latest"
USER_AGENT = "mcmod-cli"

# (connect, read) seconds; a stalled download fails instead of hanging forever
DEFAULT_TIMEOUT = (10, 120)


def _get(url: str, timeout=DEFAULT_TIMEOUT) -> requests.Response:
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"HTTP error: {e}") from e
    return response


def fetch_release_manifest(url: str = RELEASES_URL) -> ReleaseManifest:
    """
    Fetch and parse the latest release record.

    Raises:
        NetworkError: On transport failure or a malformed response
    """
    logger.debug(f"Fetching release manifest: {url}")
    response = _get(url)
    try:
        payload: Dict[str, Any] = response.json()
    except ValueError as e:
        raise NetworkError(f"JSON parse error: {e}") from e
    return parse_release_manifest(payload)


def parse_release_manifest(payload: Dict[str, Any]) -> ReleaseManifest:
    """Validate a decoded release record."""
    if not isinstance(payload, dict) or "tag_name" not in payload:
        raise NetworkError("No tag_name in release response")
    try:
        return ReleaseManifest.model_validate(payload)
    except PydanticValidationError as e:
        raise NetworkError(f"Malformed release response: {e}") from e


def latest_version(manifest: ReleaseManifest) -> str:
    """The release tag without a leading 'v' (v1.2.0 -> 1.2.0)."""
    tag = manifest.tag_name
    return tag[1:] if tag.startswith("v") else tag


def asset_url(manifest: ReleaseManifest, asset_name: str) -> str:
    """
    Find the download URL of the asset named exactly asset_name.

    Raises:
        McmodError: If no asset matches or it has no download URL
    """
    for asset in manifest.assets:
        if asset.name == asset_name:
            if not asset.browser_download_url:
                raise NetworkError(f"No download URL for asset '{asset_name}'")
            return asset.browser_download_url

    raise McmodError(
        f"No release asset found matching '{asset_name}' for v{latest_version(manifest)}"
    )


def download_asset(url: str) -> bytes:
    """Download a release asset."""
    logger.debug(f"Downloading {url}")
    content = _get(url).content
    logger.debug(f"Downloaded {len(content)} bytes")
    return content
