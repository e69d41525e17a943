"""Git command-line adapters."""

from .repository import GitRepository
from .runner import SubprocessGitRunner

__all__ = ["GitRepository", "SubprocessGitRunner"]
