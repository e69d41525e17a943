"""Configuration adapters."""

from .toml_config_provider import TomlConfigProvider

__all__ = ["TomlConfigProvider"]
