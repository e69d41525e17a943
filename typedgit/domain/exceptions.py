"""Domain exceptions for typedgit.

These exceptions describe invalid identifiers, malformed git output and
failed git commands. They should be caught at the application boundary
(CLI, callers of the repository facade) and converted to user-facing
messages there.
"""


class TypedGitError(Exception):
    """Base exception for all typedgit errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class InvalidArgumentError(TypedGitError, TypeError):
    """Raised when a required argument is missing or has the wrong type.

    Always a programming error in the caller.
    """

    def __init__(self, argument: str, message: str | None = None) -> None:
        super().__init__(message or f"Argument '{argument}' is required")
        self.argument = argument


class IdentifierFormatError(TypedGitError, ValueError):
    """Raised when a string does not satisfy an identifier grammar.

    Attributes:
        reason: Short reason such as "Empty" or "Too short".
        type_name: Name of the identifier type being constructed.
        value: The rejected string.
    """

    def __init__(self, reason: str, type_name: str, value: str) -> None:
        super().__init__(f"Invalid {type_name} {value!r}: {reason}")
        self.reason = reason
        self.type_name = type_name
        self.value = value


class NotARepositoryError(TypedGitError, ValueError):
    """Raised when a path is not a git repository."""

    def __init__(self, path: object) -> None:
        super().__init__(
            f"Not a git repository: {path}",
            hint="Run inside a git working tree or pass -C <path>",
        )
        self.path = path


class UncommittedChangesError(TypedGitError):
    """Raised when an operation needs a clean working tree."""


class GitParseError(TypedGitError):
    """Raised when git output does not have the expected shape.

    Attributes:
        line: The offending line, or None for end-of-output errors.
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(
            message,
            hint="Check the git version and the flags passed to the command",
        )
        self.line = line


class GitCommandError(TypedGitError):
    """Raised when a git command fails.

    Attributes:
        command_line: The full command line that was executed, or "".
        output: Combined stdout/stderr of the command, or "".
        exit_code: Exit code returned by git, or None if unavailable.
    """

    DEFAULT_MESSAGE = "The git operation failed"

    def __init__(
        self,
        message: str | None = None,
        command_line: str = "",
        output: str = "",
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.command_line = command_line
        self.output = output
        self.exit_code = exit_code

    @classmethod
    def from_result(cls, message: str | None, result) -> "GitCommandError":
        """Build an error from a CommandResult.

        Args:
            message: Description of the failed operation.
            result: CommandResult of the failed command.

        Returns:
            GitCommandError carrying the command line, output and exit code.
        """
        return cls(
            message,
            command_line=result.command_line,
            output=result.combined_output,
            exit_code=result.exit_code,
        )

    def __str__(self) -> str:
        details = []
        if self.exit_code is not None:
            details.append(f"git exit code {self.exit_code}")
        if self.command_line:
            details.append(f"command: {self.command_line}")
        msg = self.message
        if details:
            msg += f" ({', '.join(details)})"
        output = self.output.strip()
        if output:
            msg += f": {output}"
        return msg
