"""
Settings for the nfa-branches CLI, optionally driven by a TOML file.

Merging order:
    defaults -> [nfa] table of the TOML file -> explicit command-line flags

Example nfa_branches.toml:

    [nfa]
    grammar = "states.json"
    verbose = true
    branches = true
    max_branches = 16
    dot = "run.dot"
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import toml

from .branches import DEFAULT_BRANCH_LIMIT


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    grammar: str = "states.json"
    verbose: bool = False
    branches: bool = False
    max_branches: int = DEFAULT_BRANCH_LIMIT
    dot: Optional[str] = None
    workers: Optional[int] = None
    log_level: str = "WARNING"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Expected type per key; bool is checked before int because bool is an int subclass.
_TYPES: Dict[str, tuple[type, ...]] = {
    "grammar": (str,),
    "verbose": (bool,),
    "branches": (bool,),
    "max_branches": (int,),
    "dot": (str,),
    "workers": (int,),
    "log_level": (str,),
}


def _check(key: str, value: Any) -> Any:
    expected = _TYPES[key]
    if isinstance(value, bool) and bool not in expected:
        raise ConfigError(f"'{key}' must be {expected[0].__name__}, got bool")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' must be {expected[0].__name__}, got {type(value).__name__}")
    if key in ("max_branches", "workers") and value < 1:
        raise ConfigError(f"'{key}' must be at least 1")
    if key == "log_level" and value.upper() not in LOG_LEVELS:
        raise ConfigError(f"'log_level' must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return value


def merge_settings(base: Settings, overrides: Mapping[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    updates: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{key}'")
        if value is None:
            continue
        updates[key] = _check(key, value)
    return replace(base, **updates)


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Defaults, or defaults overlaid with the [nfa] table of the given TOML file."""
    settings = Settings()
    if path is None:
        return settings
    try:
        data = toml.load(str(path))
    except FileNotFoundError as ex:
        raise ConfigError(f"Config file not found: {path}") from ex
    except toml.TomlDecodeError as ex:
        raise ConfigError(f"Invalid TOML in {path}: {ex}") from ex
    except (OSError, UnicodeDecodeError) as ex:
        raise ConfigError(f"Cannot read config file {path}: {ex}") from ex

    section = data.get("nfa", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[nfa] in {path} must be a table")
    return merge_settings(settings, section)
