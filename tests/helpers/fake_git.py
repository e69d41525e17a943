"""In-memory GitRunner for facade unit tests."""

from collections.abc import Generator, Sequence
from pathlib import Path

from typedgit.domain.entities import CommandResult
from typedgit.domain.exceptions import GitCommandError


class FakeGitRunner:
    """GitRunner that answers from canned responses and records calls.

    Responses are keyed by the git subcommand (the first argument after
    "-C <path>"). Unknown subcommands succeed with empty output.

    Example:
        runner = FakeGitRunner()
        runner.respond("rev-parse", stdout="a" * 40 + "\\n")
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.streamed_lines_read = 0
        self.stream_closed = False
        self._responses: dict[str, CommandResult] = {}
        self._stream: tuple[list[str], int] = ([], 0)

    @staticmethod
    def _subcommand(args: Sequence[str]) -> str:
        args = list(args)
        if args[:1] == ["-C"]:
            args = args[2:]
        return args[0] if args else ""

    def respond(
        self, subcommand: str, stdout: str = "", stderr: str = "", exit_code: int = 0
    ) -> None:
        self._responses[subcommand] = CommandResult(
            args=("git", subcommand), exit_code=exit_code, stdout=stdout, stderr=stderr
        )

    def stream(self, text: str, exit_code: int = 0) -> None:
        self._stream = (text.splitlines(), exit_code)

    def run(self, args: Sequence[str], cwd: Path | None = None) -> CommandResult:
        self.calls.append(list(args))
        canned = self._responses.get(self._subcommand(args))
        if canned is None:
            return CommandResult(args=("git", *args), exit_code=0)
        return CommandResult(
            args=("git", *args),
            exit_code=canned.exit_code,
            stdout=canned.stdout,
            stderr=canned.stderr,
        )

    def stream_lines(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
    ) -> Generator[str, None, None]:
        self.calls.append(list(args))
        lines, exit_code = self._stream
        try:
            for line in lines:
                self.streamed_lines_read += 1
                yield line
        finally:
            self.stream_closed = True
        if exit_code != 0:
            raise GitCommandError("git command failed", exit_code=exit_code)
