"""
mcmod Global Preferences

User-scope settings shared by every project, stored as sparse TOML:
- Linux/macOS: $XDG_CONFIG_HOME/mcmod/config.toml (or ~/.config/mcmod/config.toml)
- Windows: %APPDATA%/mcmod/config.toml

Config structure:
[defaults]            # pre-fill values for `mcmod init`
author = "Jane"
language = "kotlin"

[options]             # dev client options.txt
fullscreen = true
gamma = 1.5

[gamerules]           # dev-defaults data pack
time_of_day = "noon"

A missing file, invalid TOML or a schema mismatch all read as defaults.
Older files holding only [defaults] load fine; the other groups default in.
"""

import json
import tomllib
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from mcmod.exceptions import InvalidValueError, McmodError
from mcmod.logging_config import logger
from mcmod.paths import global_config_dir
from mcmod.schemas import GlobalPreferences
from mcmod.utils import atomic_write_text, write_file

CONFIG_FILENAME = "config.toml"

NOT_SET = "(not set)"

TIME_NAMES = ("noon", "day", "midnight", "night", "sunrise", "sunset")

# Short / camelCase / snake_case aliases -> dotted key
KEY_ALIASES = {
    "author": "defaults.author",
    "language": "defaults.language",
    "fullscreen": "options.fullscreen",
    "pauseOnLostFocus": "options.pause_on_lost_focus",
    "pause_on_lost_focus": "options.pause_on_lost_focus",
    "autoJump": "options.auto_jump",
    "auto_jump": "options.auto_jump",
    "reducedDebugInfo": "options.reduced_debug_info",
    "reduced_debug_info": "options.reduced_debug_info",
    "gamma": "options.gamma",
    "doDaylightCycle": "gamerules.do_daylight_cycle",
    "do_daylight_cycle": "gamerules.do_daylight_cycle",
    "doWeatherCycle": "gamerules.do_weather_cycle",
    "do_weather_cycle": "gamerules.do_weather_cycle",
    "timeOfDay": "gamerules.time_of_day",
    "time_of_day": "gamerules.time_of_day",
}

# Display order for `config list`: (section title, dotted key, display name)
LISTED_KEYS = [
    ("Defaults", "defaults.author", "author"),
    ("Defaults", "defaults.language", "language"),
    ("Client Options", "options.fullscreen", "fullscreen"),
    ("Client Options", "options.pause_on_lost_focus", "pauseOnLostFocus"),
    ("Client Options", "options.auto_jump", "autoJump"),
    ("Client Options", "options.reduced_debug_info", "reducedDebugInfo"),
    ("Client Options", "options.gamma", "gamma"),
    ("Game Rules", "gamerules.do_daylight_cycle", "doDaylightCycle"),
    ("Game Rules", "gamerules.do_weather_cycle", "doWeatherCycle"),
    ("Game Rules", "gamerules.time_of_day", "timeOfDay"),
]


def normalize_key(key: str) -> str:
    """Map short, camelCase and snake_case key names to their dotted form."""
    return KEY_ALIASES.get(key, key)


def parse_bool(value: str) -> bool:
    """Parse true/false/yes/no/1/0 (case-insensitive)."""
    lower = value.lower()
    if lower in ("true", "yes", "1"):
        return True
    if lower in ("false", "no", "0"):
        return False
    raise InvalidValueError(f"Invalid boolean '{value}': must be true/false/yes/no/1/0")


def parse_language(value: str) -> str:
    lower = value.lower()
    if lower not in ("java", "kotlin"):
        raise InvalidValueError(f"Invalid language '{value}': must be 'java' or 'kotlin'")
    return lower


def parse_gamma(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise InvalidValueError(f"Invalid gamma value '{value}': must be a number") from None


def parse_time_of_day(value: str) -> str:
    """Accept a named time or a raw, non-negative tick number."""
    lower = value.lower()
    if lower in TIME_NAMES or (value.isascii() and value.isdigit()):
        return lower
    raise InvalidValueError(
        f"Invalid time '{value}': must be noon/day/midnight/night/sunrise/sunset or a tick number"
    )


# Dotted key -> parser for `config set`
VALUE_PARSERS: Dict[str, Callable[[str], object]] = {
    "defaults.author": str,
    "defaults.language": parse_language,
    "options.fullscreen": parse_bool,
    "options.pause_on_lost_focus": parse_bool,
    "options.auto_jump": parse_bool,
    "options.reduced_debug_info": parse_bool,
    "options.gamma": parse_gamma,
    "gamerules.do_daylight_cycle": parse_bool,
    "gamerules.do_weather_cycle": parse_bool,
    "gamerules.time_of_day": parse_time_of_day,
}


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def config_path() -> Path:
    return global_config_dir() / CONFIG_FILENAME


def load_preferences(path: Optional[Path] = None) -> GlobalPreferences:
    """
    Load global preferences, falling back to defaults.

    Missing file, bad UTF-8, unparseable TOML and schema violations all
    yield defaults.
    Read errors (permissions, etc.) propagate.
    """
    path = path or config_path()
    if not path.exists():
        return GlobalPreferences()

    try:
        content = path.read_text(encoding="utf-8")
        return GlobalPreferences.model_validate(tomllib.loads(content))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError, PydanticValidationError) as e:
        logger.warning(f"Ignoring unreadable global config {path}: {e}")
        return GlobalPreferences()


def save_preferences(prefs: GlobalPreferences, path: Optional[Path] = None) -> Path:
    """Write preferences as sparse TOML (unset keys omitted), creating the directory."""
    path = path or config_path()
    atomic_write_text(path, tomli_w.dumps(prefs.model_dump(mode="json", exclude_none=True)))
    logger.debug(f"Saved global config to {path}")
    return path


class PreferencesStore:
    """
    Key-based access to Global Preferences.

    Reads never fail on bad content; `set` validates the value, then
    persists the whole document.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or config_path()
        self.prefs = load_preferences(self.path)

    def get(self, key: str) -> Optional[str]:
        """
        Get a value by key as display text.

        Args:
            key: Short ("author"), camelCase ("autoJump") or dotted ("options.gamma")

        Returns:
            The value, or None if unset or unknown
        """
        dotted = normalize_key(key)
        if dotted not in VALUE_PARSERS:
            return None
        group, name = dotted.split(".", 1)
        value = getattr(getattr(self.prefs, group), name)
        return None if value is None else _format_value(value)

    def set(self, key: str, value: str) -> None:
        """Validate and store a value, then save the file."""
        dotted = normalize_key(key)
        parser = VALUE_PARSERS.get(dotted)
        if parser is None:
            raise McmodError(
                f"Unknown config key '{key}'. Run 'mcmod config list' to see valid keys."
            )
        group, name = dotted.split(".", 1)
        setattr(getattr(self.prefs, group), name, parser(value))
        save_preferences(self.prefs, self.path)
        logger.info(f"Saved global config: {dotted}={value}")

    def list(self) -> List[Tuple[str, str, str]]:
        """Return (section, key, display value) for every known key."""
        entries = []
        for section, dotted, display_name in LISTED_KEYS:
            value = self.get(dotted)
            entries.append((section, display_name, NOT_SET if value is None else value))
        return entries


# ---------------------------------------------------------------------------
# Dev run directory: options.txt and the dev-defaults data pack
# ---------------------------------------------------------------------------

def render_options_txt(prefs: GlobalPreferences) -> str:
    """Render the client options.txt from the configured options."""
    options = prefs.options
    lines = ["lang:en_us"]
    for key, value in (
        ("fullscreen", options.fullscreen),
        ("pauseOnLostFocus", options.pause_on_lost_focus),
        ("autoJump", options.auto_jump),
        ("reducedDebugInfo", options.reduced_debug_info),
        ("gamma", options.gamma),
    ):
        if value is not None:
            lines.append(f"{key}:{_format_value(value)}")
    lines.append("")
    return "\n".join(lines)


def copy_options_to(dest: Path, prefs: GlobalPreferences) -> bool:
    """
    Write options.txt to dest unless it already exists.

    Returns:
        True if the file was written
    """
    if dest.exists():
        return False
    write_file(dest, render_options_txt(prefs))
    return True


def time_to_tick(time: str) -> str:
    """Convert a time-of-day name to a `time set` argument."""
    lower = time.lower()
    if lower in ("noon", "day"):
        return "day"
    if lower in ("midnight", "night"):
        return "midnight"
    if lower == "sunrise":
        return "23000"
    if lower == "sunset":
        return "12000"
    return time


# Minecraft version -> data pack format (major, minor)
PACK_FORMATS = {
    "1.21": (48, 0),
    "1.21.1": (48, 0),
    "1.21.2": (57, 0),
    "1.21.3": (57, 0),
    "1.21.4": (61, 0),
    "1.21.5": (71, 0),
    "1.21.6": (80, 0),
    "1.21.7": (81, 0),
    "1.21.8": (81, 0),
    "1.21.9": (88, 0),
    "1.21.10": (88, 0),
    "1.21.11": (94, 1),
}


def pack_format_for(mc_version: str) -> Tuple[int, int]:
    """
    Map a Minecraft version to its data pack format.

    Unknown 1.21.x patch releases use the nearest known format; anything else
    falls back to the 1.21.4 format.
    """
    if mc_version in PACK_FORMATS:
        return PACK_FORMATS[mc_version]
    parts = mc_version.split(".", 2)
    if len(parts) == 3 and parts[2].isdigit():
        patch = int(parts[2])
        if patch >= 11:
            return PACK_FORMATS["1.21.11"]
        if patch >= 9:
            return PACK_FORMATS["1.21.9"]
    return PACK_FORMATS["1.21.4"]


def _format_pack_value(major: int, minor: int, paired: bool) -> str:
    return f"[{major}, {minor}]" if paired else str(major)


def render_pack_mcmeta(mc_version: str) -> str:
    """
    Render pack.mcmeta. 1.21.9+ also declares min_format/max_format;
    formats with a minor component are written as [major, minor] pairs.
    """
    major, minor = pack_format_for(mc_version)
    paired = minor > 0
    fields = [f'"pack_format": {_format_pack_value(major, minor, paired)}']
    if major >= 88:
        fields.append(f'"min_format": {_format_pack_value(major, 0, paired)}')
        fields.append(f'"max_format": {_format_pack_value(major, minor, paired)}')
    fields.append('"description": "Dev defaults (generated by mcmod)"')

    body = ",\n".join(f"    {field}" for field in fields)
    return "{\n  \"pack\": {\n" + body + "\n  }\n}\n"


def render_init_mcfunction(prefs: GlobalPreferences) -> str:
    rules = prefs.gamerules
    commands = []
    if rules.do_daylight_cycle is not None:
        commands.append(f"gamerule doDaylightCycle {_format_value(rules.do_daylight_cycle)}")
    if rules.do_weather_cycle is not None:
        commands.append(f"gamerule doWeatherCycle {_format_value(rules.do_weather_cycle)}")
    if rules.time_of_day is not None:
        commands.append(f"time set {time_to_tick(rules.time_of_day)}")
    if commands:
        commands.append("")
    return "\n".join(commands)


def write_dev_datapack(project_root: Path, prefs: GlobalPreferences, mc_version: str) -> Path:
    """
    Write the dev-defaults data pack into run/world/datapacks.

    The pack runs dev:init on world load to apply the configured game rules.

    Returns:
        The data pack directory
    """
    pack_dir = project_root / "run" / "world" / "datapacks" / "dev-defaults"
    write_file(pack_dir / "pack.mcmeta", render_pack_mcmeta(mc_version))
    write_file(
        pack_dir / "data" / "minecraft" / "tags" / "function" / "load.json",
        json.dumps({"values": ["dev:init"]}, indent=2) + "\n",
    )
    write_file(
        pack_dir / "data" / "dev" / "function" / "init.mcfunction",
        render_init_mcfunction(prefs),
    )
    return pack_dir
