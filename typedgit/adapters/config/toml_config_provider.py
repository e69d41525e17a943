"""TOML-based configuration provider.

Loads configuration from .typedgit/config.toml with global config fallback.

Config loading priority (highest to lowest):
1. Local: <repo>/.typedgit/config.toml (repo-specific)
2. Global: ~/.config/typedgit/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from typedgit.domain.config import TypedGitConfig
from typedgit.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config (~/.config/typedgit/config.toml) if present
    2. Load local config (<repo>/.typedgit/config.toml) if present
    3. Local values override global values (key-level merge)
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, repo_root: Path | None) -> TypedGitConfig:
        """Load configuration with global fallback.

        Uses TypedGitConfig.from_partial so validation happens at each
        merge step.

        Args:
            repo_root: Repository root, or None to skip local config

        Returns:
            TypedGitConfig instance with merged global/local values or defaults
        """
        config = TypedGitConfig.default()

        global_path = get_global_config_path()
        if global_path.exists():
            try:
                global_data = load_config_data(global_path)
                config = TypedGitConfig.from_partial(config, global_data)
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if repo_root is None:
            return config

        local_path = get_local_config_path(repo_root)
        if local_path.exists():
            try:
                local_data = load_config_data(local_path)
                config = TypedGitConfig.from_partial(config, local_data)
                logger.debug("Loaded local config from %s", local_path)
            except (FileNotFoundError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse %s: %s. Using global/default configuration.",
                    local_path,
                    e,
                )

        return config
