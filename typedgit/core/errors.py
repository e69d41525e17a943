"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all typedgit CLI commands.
"""

from typing import NoReturn

import click


class TypedGitCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise TypedGitCliError(
            "Not in a git repository",
            hint="Run inside a git working tree or pass -C <path>"
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def repo_not_found_error(path: str) -> NoReturn:
    """Raise error when no repository contains the working directory.

    Args:
        path: The directory that was searched from.

    Raises:
        TypedGitCliError: Always raises with a -C hint.
    """
    raise TypedGitCliError(
        f"Not in a git repository: {path}",
        hint="Run inside a git working tree or pass -C <path>",
    )


def unknown_identifier_kind_error(kind: str, kinds: list[str]) -> NoReturn:
    """Raise error when 'validate' is given an unknown identifier kind.

    Raises:
        TypedGitCliError: Always raises listing the valid kinds.
    """
    raise TypedGitCliError(
        f"Unknown identifier kind '{kind}'",
        hint=f"Valid kinds: {', '.join(kinds)}",
    )
