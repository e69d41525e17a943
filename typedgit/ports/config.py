"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from typedgit.domain.config import TypedGitConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, repo_root: Path | None) -> TypedGitConfig:
        """Load configuration for a repository.

        Args:
            repo_root: Repository root holding .typedgit/config.toml, or None
                       to load only global settings.

        Returns:
            TypedGitConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
