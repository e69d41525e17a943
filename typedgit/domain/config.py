"""Config domain models for typedgit.

Configuration is stored in TOML (globally in ~/.config/typedgit/config.toml
and per repository in .typedgit/config.toml) and controls how git is
invoked and how history listings are produced. This module defines the
domain models that represent validated configuration state.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any

VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
)


@dataclass(frozen=True)
class GitConfig:
    """Configuration for invoking the git executable.

    Attributes:
        program: Name or path of the git executable.
        default_remote: Remote used by push when none is given.
        timeout: Seconds before a git command is abandoned, or None to wait
                 indefinitely. Streamed commands such as rev-list are
                 killed once it elapses, even mid-iteration.

    Raises:
        ValueError: If program or default_remote is empty, or timeout is not positive.
    """

    program: str = "git"
    default_remote: str = "origin"
    timeout: float | None = None

    def __post_init__(self) -> None:
        """Validate git config after initialization."""
        if not isinstance(self.program, str) or not self.program.strip():
            raise ValueError("program must be a non-empty string")
        if not isinstance(self.default_remote, str) or not self.default_remote.strip():
            raise ValueError("default_remote must be a non-empty string")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass(frozen=True)
class LogConfig:
    """Configuration for history listings.

    Attributes:
        max_count: Default number of commits to list, -1 for no limit.
        include_parents: Ask git to include parent hashes on commit lines.

    Raises:
        ValueError: If max_count is less than -1.
    """

    max_count: int = -1
    include_parents: bool = True

    def __post_init__(self) -> None:
        """Validate log config after initialization."""
        if self.max_count < -1:
            raise ValueError(f"max_count must be -1 or greater, got {self.max_count}")


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for diagnostic logging.

    Attributes:
        level: Standard logging level name used when --verbose is not given.
    """

    level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.level, str) or self.level.upper() not in VALID_LOG_LEVELS:
            valid = ", ".join(sorted(VALID_LOG_LEVELS))
            raise ValueError(f"Unknown log level '{self.level}'. Valid levels: {valid}")
        object.__setattr__(self, "level", self.level.upper())

    @property
    def numeric_level(self) -> int:
        return logging.getLevelName(self.level)


@dataclass(frozen=True)
class TypedGitConfig:
    """Complete typedgit configuration.

    Attributes:
        git: Git invocation configuration
        log: History listing configuration
        logging: Diagnostic logging configuration
    """

    git: GitConfig = field(default_factory=GitConfig)
    log: LogConfig = field(default_factory=LogConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def default() -> "TypedGitConfig":
        """Create a config with all default values."""
        return TypedGitConfig(git=GitConfig(), log=LogConfig(), logging=LoggingConfig())

    @staticmethod
    def from_partial(base: "TypedGitConfig", data: dict[str, Any]) -> "TypedGitConfig":
        """Overlay a partial config dictionary onto an existing config.

        Only keys present in data change; each section is re-validated.

        Args:
            base: Config supplying values for missing keys.
            data: Parsed TOML data, possibly with missing sections or keys.

        Returns:
            New TypedGitConfig with the overrides applied.

        Raises:
            ValueError: If a section is not a table, a key is unknown,
                        or a resulting value is invalid.
        """
        sections = {}
        for section in fields(TypedGitConfig):
            current = getattr(base, section.name)
            overrides = data.get(section.name, {})
            if not isinstance(overrides, dict):
                raise ValueError(f"Config section [{section.name}] must be a table")

            known = {f.name for f in fields(current)}
            unknown = set(overrides) - known
            if unknown:
                raise ValueError(
                    f"Unknown keys in [{section.name}]: {', '.join(sorted(unknown))}"
                )
            sections[section.name] = replace(current, **overrides)

        return TypedGitConfig(**sections)
