"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of TypedGitConfig to/from TOML format.
"""

import os
import platform
import tomllib
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from typedgit.domain.config import TypedGitConfig

LOCAL_CONFIG_DIR = ".typedgit"
CONFIG_FILE_NAME = "config.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/typedgit/config.toml or ~/.config/typedgit/config.toml
    - Windows: %APPDATA%/typedgit/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "typedgit" / CONFIG_FILE_NAME
        return Path.home() / ".config" / "typedgit" / CONFIG_FILE_NAME
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "typedgit" / CONFIG_FILE_NAME
        return Path.home() / ".config" / "typedgit" / CONFIG_FILE_NAME


def get_local_config_path(repo_root: Path) -> Path:
    """Get the path to a repository's local config file (may not exist)."""
    return repo_root / LOCAL_CONFIG_DIR / CONFIG_FILE_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def merge_config_data(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two config dictionaries, with override values taking precedence.

    Merges key by key within each section; a non-table value in override
    replaces the base value outright.

    Args:
        base: Base configuration dictionary
        override: Override configuration dictionary (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result: dict[str, Any] = {}

    for section in set(base.keys()) | set(override.keys()):
        base_section = base.get(section, {})
        override_section = override.get(section, {})

        if isinstance(base_section, dict) and isinstance(override_section, dict):
            result[section] = {**base_section, **override_section}
        elif section in override:
            result[section] = override_section
        else:
            result[section] = base_section

    return result


def config_data_to_config(data: dict[str, Any]) -> TypedGitConfig:
    """Convert raw config data dictionary to TypedGitConfig.

    Args:
        data: Dictionary with config sections

    Returns:
        TypedGitConfig instance

    Raises:
        ValueError: If a section or value is invalid
    """
    return TypedGitConfig.from_partial(TypedGitConfig.default(), data)


def config_to_data(config: TypedGitConfig) -> dict[str, Any]:
    """Convert a TypedGitConfig to a TOML-serializable dictionary.

    None values are dropped since TOML has no null.
    """
    data = asdict(config)
    return {
        section: {key: value for key, value in values.items() if value is not None}
        for section, values in data.items()
    }


def load_config(path: Path) -> TypedGitConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to config.toml file

    Returns:
        Parsed TypedGitConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    data = load_config_data(path)
    return config_data_to_config(data)


def save_config(config: TypedGitConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: TypedGitConfig to save
        path: Destination path for config.toml
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)


def create_default_config_file(path: Path) -> None:
    """Create a default config.toml file with comments.

    Args:
        path: Destination path for config.toml
    """
    # Template string to preserve comments and formatting
    template = """\
# typedgit configuration
# Created by: typedgit config init

[git]
# Name or path of the git executable
program = "git"

# Remote used by push when none is given
default_remote = "origin"

# Seconds before a git command is abandoned (omit to wait indefinitely)
# timeout = 30

[log]
# Default number of commits listed by 'typedgit log' (-1 for no limit)
max_count = -1

# Include parent hashes in history listings
include_parents = true

[logging]
# Log level when --verbose is not given
level = "WARNING"
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        f.write(template)
