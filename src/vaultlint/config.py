"""Vault configuration: type mappings, exclude globs, validation switches.

Configuration lives in a TOML file at the vault root::

    version = "1.0"
    exclude_globs = ["Templates/**", "_archive/**"]

    [type_mappings]
    project-index = "project"
    decision-log  = "decision"

    [validation]
    warn_on_mapped_types = true

Every key is optional; a missing file means "no mappings, no excludes, no
mapped-type warnings".
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any

import pathspec
from loguru import logger

CONFIG_FILENAMES = ("vaultlint.toml", ".vaultlint.toml")

_TOP_LEVEL_KEYS = {"version", "type_mappings", "exclude_globs", "validation"}
_VALIDATION_KEYS = {"warn_on_mapped_types"}


class ConfigError(ValueError):
    """Configuration file could not be read or does not match the expected shape."""


@dataclass(frozen=True)
class VaultConfig:
    version: str = "1.0"
    type_mappings: dict[str, str] = field(default_factory=dict)
    exclude_globs: tuple[str, ...] = ()
    warn_on_mapped_types: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VaultConfig":
        return parse_config(data)

    @cached_property
    def exclude_spec(self) -> pathspec.PathSpec:
        return pathspec.PathSpec.from_lines("gitwildmatch", self.exclude_globs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "type_mappings": dict(self.type_mappings),
            "exclude_globs": list(self.exclude_globs),
            "validation": {"warn_on_mapped_types": self.warn_on_mapped_types},
        }


DEFAULT_CONFIG = VaultConfig()


# ---------------------------------------------------------------------------
# Parsing / loading
# ---------------------------------------------------------------------------


def parse_config(data: Mapping[str, Any]) -> VaultConfig:
    """Validate a plain mapping and merge it over the defaults.

    Raises :class:`ConfigError` describing every problem found.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"Invalid config: expected a table, got {type(data).__name__}")

    problems: list[str] = []
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        problems.append(f"unknown key(s): {', '.join(unknown)}")

    version = data.get("version", DEFAULT_CONFIG.version)
    if not isinstance(version, str):
        problems.append("version: expected string")

    mappings = data.get("type_mappings", {})
    if not isinstance(mappings, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in mappings.items()
    ):
        problems.append("type_mappings: expected a table of string -> string")
        mappings = {}

    globs = data.get("exclude_globs", [])
    if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
        problems.append("exclude_globs: expected an array of strings")
        globs = []

    validation = data.get("validation", {})
    warn = False
    if not isinstance(validation, Mapping):
        problems.append("validation: expected a table")
    else:
        unknown_validation = sorted(set(validation) - _VALIDATION_KEYS)
        if unknown_validation:
            problems.append(f"validation: unknown key(s): {', '.join(unknown_validation)}")
        warn = validation.get("warn_on_mapped_types", False)
        if not isinstance(warn, bool):
            problems.append("validation.warn_on_mapped_types: expected boolean")

    if problems:
        raise ConfigError(f"Invalid config: {'; '.join(problems)}")

    return VaultConfig(
        version=version,
        type_mappings=dict(mappings),
        exclude_globs=tuple(globs),
        warn_on_mapped_types=warn,
    )


def load_config(path: Path) -> VaultConfig:
    """Read and validate a TOML config file."""
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config {path}: {exc}") from exc
    config = parse_config(data)
    logger.debug(
        "Loaded config {} ({} type mapping(s), {} exclude glob(s))",
        path,
        len(config.type_mappings),
        len(config.exclude_globs),
    )
    return config


def find_config(vault_root: Path) -> Path | None:
    """Return the first config file present in *vault_root*, if any."""
    for name in CONFIG_FILENAMES:
        candidate = Path(vault_root) / name
        if candidate.is_file():
            return candidate
    return None


def load_vault_config(vault_root: Path, explicit: Path | None = None) -> VaultConfig:
    """Load *explicit* if given, else the vault's own config file, else defaults."""
    path = explicit or find_config(vault_root)
    return load_config(path) if path else DEFAULT_CONFIG


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def resolve_type(user_type: str, config: VaultConfig | Mapping[str, str] | None = None) -> str:
    """Map a user-written type to its canonical registered name.

    >>> resolve_type("project-index", {"project-index": "project"})
    'project'
    >>> resolve_type("decision", None)
    'decision'
    """
    if config is None:
        return user_type
    mappings = config.type_mappings if isinstance(config, VaultConfig) else config
    return mappings.get(user_type, user_type)


def should_exclude_file(relative_path: str, config: VaultConfig | None) -> bool:
    """True if *relative_path* (POSIX, relative to the vault root) matches an exclude glob."""
    if config is None or not config.exclude_globs:
        return False
    return config.exclude_spec.match_file(relative_path)
