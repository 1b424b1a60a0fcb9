from pydantic import BaseModel, Field
from typing import List, Literal, Optional

MOD_ID_PATTERN = r"^[a-z][a-z0-9_]*$"
PACKAGE_PATTERN = r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$"

Language = Literal["java", "kotlin"]

LOADER_NAMES = ("fabric", "neoforge")


# ---------------------------------------------------------------------------
# Project descriptor (mcmod.toml)
# ---------------------------------------------------------------------------

class ModInfo(BaseModel):
    """
    Identity of the generated mod.
    """
    mod_id: str = Field(pattern=MOD_ID_PATTERN)
    mod_name: str
    package: str = Field(pattern=PACKAGE_PATTERN)
    author: str
    description: str
    language: Language = "java"


class Loaders(BaseModel):
    """
    One flag per optional loader module. Flags only ever go False -> True.
    """
    fabric: bool = False
    neoforge: bool = False


class Features(BaseModel):
    """
    Orthogonal add-ons.
    """
    ci: bool = False


class Versions(BaseModel):
    """
    Pinned dependency versions. Defaults are the offline fallbacks.
    """
    minecraft: str = "1.21.4"
    fabric_loader: str = "0.16.9"
    fabric_api: str = "0.111.0+1.21.4"
    neoforge: str = "21.4.156"


class ProjectDescriptor(BaseModel):
    """
    Persisted record of a project's identity, enabled modules, add-ons and versions.

    In-memory instances are snapshots: mutate, then save wholesale.
    """
    mod_info: ModInfo
    loaders: Loaders = Field(default_factory=Loaders)
    features: Features = Field(default_factory=Features)
    versions: Versions = Field(default_factory=Versions)

    def enabled_platforms(self) -> List[str]:
        """Returns enabled loader names in fixed order (fabric, neoforge)."""
        return [name for name in LOADER_NAMES if getattr(self.loaders, name)]


# ---------------------------------------------------------------------------
# Global preferences (config.toml in the user config dir)
# ---------------------------------------------------------------------------

class GlobalDefaults(BaseModel):
    """Defaults used to pre-fill `mcmod init` prompts."""
    author: Optional[str] = None
    language: Optional[Language] = None


class ClientOptions(BaseModel):
    """Values written into the dev client's options.txt."""
    fullscreen: Optional[bool] = None
    pause_on_lost_focus: Optional[bool] = None
    auto_jump: Optional[bool] = None
    reduced_debug_info: Optional[bool] = None
    gamma: Optional[float] = None


class GameRuleDefaults(BaseModel):
    """Game rules applied by the dev-defaults data pack on world load."""
    do_daylight_cycle: Optional[bool] = None
    do_weather_cycle: Optional[bool] = None
    time_of_day: Optional[str] = None


def _default_client_options() -> ClientOptions:
    return ClientOptions(
        fullscreen=True,
        pause_on_lost_focus=False,
        auto_jump=False,
        reduced_debug_info=False,
    )


def _default_game_rules() -> GameRuleDefaults:
    return GameRuleDefaults(
        do_daylight_cycle=False,
        do_weather_cycle=False,
        time_of_day="noon",
    )


class GlobalPreferences(BaseModel):
    """
    User-scope preferences. A missing group gets its structural defaults;
    inside a present group, a missing key stays unset.
    """
    defaults: GlobalDefaults = Field(default_factory=GlobalDefaults)
    options: ClientOptions = Field(default_factory=_default_client_options)
    gamerules: GameRuleDefaults = Field(default_factory=_default_game_rules)


# ---------------------------------------------------------------------------
# Release manifest (GitHub "latest release" response)
# ---------------------------------------------------------------------------

class ReleaseAsset(BaseModel):
    """A downloadable file attached to a release."""
    name: str
    browser_download_url: Optional[str] = None


class ReleaseManifest(BaseModel):
    """The subset of a release record that self-update reads."""
    tag_name: str
    assets: List[ReleaseAsset] = Field(default_factory=list)
