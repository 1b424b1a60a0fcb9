"""
Latest Minecraft / Fabric / NeoForge versions for new projects.

Every lookup falls back to the pinned default on failure; `init` never
fails because a metadata server is unreachable.
"""

import re
from typing import Callable, List, Optional

import requests

from mcmod.exceptions import McmodError, NetworkError
from mcmod.logging_config import logger
from mcmod.schemas import Versions

FABRIC_GAME_URL = "https://meta.fabricmc.net/v2/versions/game"
FABRIC_LOADER_URL = "https://meta.fabricmc.net/v2/versions/loader"
FABRIC_API_METADATA_URL = "https://maven.fabricmc.net/net/fabricmc/fabric-api/fabric-api/maven-metadata.xml"
NEOFORGE_METADATA_URL = "https://maven.neoforged.net/releases/net/neoforged/neoforge/maven-metadata.xml"

TIMEOUT = 10

_VERSION_TAG = re.compile(r"<version>([^<]+)</version>")


def _http_get(url: str) -> requests.Response:
    try:
        response = requests.get(url, timeout=TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"HTTP error: {e}") from e
    return response


def _first_stable(url: str, what: str) -> str:
    try:
        entries = _http_get(url).json()
    except ValueError as e:
        raise NetworkError(f"JSON parse error: {e}") from e
    if not isinstance(entries, list):
        raise NetworkError(f"Unexpected {what} version list: expected a JSON array")
    for entry in entries:
        if not isinstance(entry, dict):
            raise NetworkError(f"Unexpected {what} version entry: {entry!r}")
        if entry.get("stable") is True and entry.get("version"):
            return entry["version"]
    raise McmodError(f"No stable {what} version found")


def maven_versions(xml: str) -> List[str]:
    """All <version> entries of a maven-metadata.xml, in file order."""
    return _VERSION_TAG.findall(xml)


def fetch_minecraft_version() -> str:
    """Latest stable Minecraft version from Fabric Meta."""
    return _first_stable(FABRIC_GAME_URL, "Minecraft")


def fetch_fabric_loader_version() -> str:
    """Latest stable Fabric Loader version from Fabric Meta."""
    return _first_stable(FABRIC_LOADER_URL, "Fabric Loader")


def latest_fabric_api(versions: List[str], mc_version: str) -> str:
    """Last fabric-api version built for mc_version (suffix +<mc_version>)."""
    matching = [v for v in versions if v.endswith(f"+{mc_version}")]
    if not matching:
        raise McmodError(f"No Fabric API version found for {mc_version}")
    return matching[-1]


def neoforge_prefix(mc_version: str) -> str:
    """
    NeoForge versions drop the leading '1.': MC 1.21.4 -> '21.4.', MC 1.21 -> '21.'
    """
    parts = mc_version.split(".", 2)
    if len(parts) >= 3:
        return f"{parts[1]}.{parts[2]}."
    if len(parts) == 2:
        return f"{parts[1]}."
    raise McmodError(f"Cannot parse Minecraft version: {mc_version}")


def latest_neoforge(versions: List[str], mc_version: str) -> str:
    prefix = neoforge_prefix(mc_version)
    matching = [v for v in versions if v.startswith(prefix)]
    if not matching:
        raise McmodError(f"No NeoForge version found for {mc_version}")
    return matching[-1]


def fetch_fabric_api_version(mc_version: str) -> str:
    return latest_fabric_api(maven_versions(_http_get(FABRIC_API_METADATA_URL).text), mc_version)


def fetch_neoforge_version(mc_version: str) -> str:
    return latest_neoforge(maven_versions(_http_get(NEOFORGE_METADATA_URL).text), mc_version)


def _with_fallback(label: str, fetch: Callable[[], str], default: str,
                   warn: Optional[Callable[[str], None]]) -> str:
    try:
        return fetch()
    except McmodError as e:
        message = f"Could not fetch {label} version: {e}"
        logger.warning(message)
        if warn:
            warn(message)
        return default


def fetch_versions(offline: bool = False, warn: Optional[Callable[[str], None]] = None) -> Versions:
    """
    Resolve the versions for a new project.

    Args:
        offline: Skip network lookups and return the defaults
        warn: Optional callback for user-facing fallback warnings

    Returns:
        Versions (each field independently fetched or defaulted)
    """
    defaults = Versions()
    if offline:
        logger.info("Using offline defaults for versions")
        return defaults

    minecraft = _with_fallback("Minecraft", fetch_minecraft_version, defaults.minecraft, warn)
    fabric_loader = _with_fallback(
        "Fabric Loader", fetch_fabric_loader_version, defaults.fabric_loader, warn
    )
    fabric_api = _with_fallback(
        "Fabric API", lambda: fetch_fabric_api_version(minecraft), defaults.fabric_api, warn
    )
    neoforge = _with_fallback(
        "NeoForge", lambda: fetch_neoforge_version(minecraft), defaults.neoforge, warn
    )

    return Versions(
        minecraft=minecraft,
        fabric_loader=fabric_loader,
        fabric_api=fabric_api,
        neoforge=neoforge,
    )
