"""Git runner port interface.

Defines the abstract interface for executing git commands. The repository
facade depends on this protocol so tests can substitute canned output.
"""

from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Protocol

from typedgit.domain.entities import CommandResult


class GitRunner(Protocol):
    """Protocol for running git commands."""

    def run(self, args: Sequence[str], cwd: Path | None = None) -> CommandResult:
        """Run a git command and capture its output.

        Args:
            args: Git command arguments (without the program name).
            cwd: Working directory, or None for the current directory.

        Returns:
            CommandResult with exit code and captured output. A non-zero
            exit code is reported, not raised.

        Raises:
            GitCommandError: If git could not be executed at all.
        """
        ...

    def stream_lines(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
    ) -> Generator[str, None, None]:
        """Run a git command and yield its standard output line by line.

        Closing the generator early must stop the command without reading
        the rest of its output.

        Args:
            args: Git command arguments (without the program name).
            cwd: Working directory, or None for the current directory.

        Yields:
            Output lines without line terminators.

        Raises:
            GitCommandError: If git could not be executed, or exited with a
                non-zero code after its output was fully read.
        """
        ...
