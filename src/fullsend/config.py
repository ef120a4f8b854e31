"""
Layered configuration: defaults < ~/.fullsendrc < <root>/.fullsendrc < CLI.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from functools import reduce
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigFileError
from .log import log

CONFIG_NAME = ".fullsendrc"
FORMATS = ("markdown", "xml")


@dataclass(frozen=True)
class Config:
    use_gitignore: bool = True
    format: str = "markdown"
    show_file_tree: bool = False
    max_file_size: int = 10 * 1024 * 1024
    verbose: bool = False


DEFAULT_CONFIG = Config()

# on-disk key -> Config field
FIELD_MAP: Dict[str, str] = {
    "useGitIgnore": "use_gitignore",
    "format": "format",
    "showFileTree": "show_file_tree",
    "maxFileSize": "max_file_size",
    "verbose": "verbose",
}

PartialConfig = Dict[str, Any]


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_size(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_format(value: Any) -> bool:
    return value in FORMATS


_VALIDATORS = {
    "use_gitignore": _is_bool,
    "format": _is_format,
    "show_file_tree": _is_bool,
    "max_file_size": _is_size,
    "verbose": _is_bool,
}


def validate_partial(data: Any) -> PartialConfig:
    """
    Convert a parsed JSON object into a partial config keyed by field name.

    Unknown keys are dropped. Raises :class:`ConfigFileError` if *data* is
    not an object or any recognised key has an invalid value.
    """
    if not isinstance(data, dict):
        raise ConfigFileError("config must be a JSON object")
    partial: PartialConfig = {}
    for key, value in data.items():
        field_name = FIELD_MAP.get(key)
        if field_name is None:
            continue
        if not _VALIDATORS[field_name](value):
            raise ConfigFileError(f"invalid value for '{key}': {value!r}")
        partial[field_name] = value
    return partial


def load_config_file(path: Path) -> Optional[PartialConfig]:
    """
    Read one config file. Returns None when the file is absent or rejected.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log(f"{path} does not exist. Skipping...", "debug")
        return None
    except (OSError, UnicodeDecodeError) as e:
        log(f"Could not read config file '{path}': {e}. Skipping...", "warn")
        return None

    try:
        return validate_partial(json.loads(text))
    except json.JSONDecodeError as e:
        log(f"Invalid JSON in config file '{path}': {e}. Skipping...", "warn")
    except ConfigFileError as e:
        log(f"Invalid config file '{path}': {e}. Skipping...", "warn")
    return None


def resolve_config(*partials: Optional[Mapping[str, Any]]) -> Config:
    """Apply *partials* left to right on top of the defaults."""
    return reduce(
        lambda cfg, partial: replace(cfg, **partial) if partial else cfg,
        partials,
        DEFAULT_CONFIG,
    )


def home_config_path() -> Path:
    return Path.home() / CONFIG_NAME


def load_config(root: Path, overrides: Optional[Mapping[str, Any]] = None) -> Config:
    """
    Resolve the configuration for a run rooted at *root*.

    *overrides* are field-named CLI values; ``None`` entries are ignored so
    unset flags never mask lower-precedence sources.
    """
    cli = {k: v for k, v in (overrides or {}).items() if v is not None}
    return resolve_config(
        load_config_file(home_config_path()),
        load_config_file(Path(root) / CONFIG_NAME),
        cli,
    )


def load_config_from_disk() -> Optional[Config]:
    """Return the resolved home config, or None if there is none."""
    partial = load_config_file(home_config_path())
    if partial is None:
        return None
    return resolve_config(partial)


def save_config_to_disk(config: Config) -> Path:
    """Write *config* to ``~/.fullsendrc`` using the on-disk key names."""
    path = home_config_path()
    fields = asdict(config)
    data = {key: fields[name] for key, name in FIELD_MAP.items()}
    try:
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"Could not write config file '{path}': {e}")
    return path
