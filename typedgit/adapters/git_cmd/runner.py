"""Git runner implementing the GitRunner protocol with subprocess."""

import logging
import shlex
import subprocess
import tempfile
import threading
from collections.abc import Generator, Sequence
from pathlib import Path

from typedgit.domain.entities import CommandResult
from typedgit.domain.exceptions import GitCommandError

logger = logging.getLogger(__name__)


class SubprocessGitRunner:
    """Runs git as a child process.

    Args:
        program: Name or path of the git executable.
        timeout: Seconds before a command is abandoned, or None. Applies to
            streamed commands too, counted from process start.
    """

    def __init__(self, program: str = "git", timeout: float | None = None) -> None:
        self.program = program
        self.timeout = timeout

    def _command(self, args: Sequence[str]) -> list[str]:
        return [self.program, *args]

    def run(self, args: Sequence[str], cwd: Path | None = None) -> CommandResult:
        """Run a git command and capture its output.

        Args:
            args: Git command arguments (without the program name).
            cwd: Working directory, or None for the current directory.

        Returns:
            CommandResult; non-zero exit codes are returned, not raised.

        Raises:
            GitCommandError: If git cannot be executed or times out.
        """
        cmd = self._command(args)
        logger.debug("Running git command: %s", shlex.join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"git command timed out after {self.timeout} seconds",
                command_line=shlex.join(cmd),
            ) from e
        except OSError as e:
            raise GitCommandError(
                f"Failed to execute git: {e}",
                command_line=shlex.join(cmd),
            ) from e

        result = CommandResult(
            args=tuple(cmd),
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.succeeded:
            logger.debug("git exited with %d: %s", result.exit_code, result.stderr.strip())
        return result

    def stream_lines(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
    ) -> Generator[str, None, None]:
        """Run a git command and yield its standard output line by line.

        The process is killed if the consumer stops before the output is
        exhausted. Standard error is spooled to a temporary file so a noisy
        command cannot block on a full pipe.

        Yields:
            Output lines without line terminators.

        Raises:
            GitCommandError: If git cannot be executed, times out, or exits
                non-zero after all output was read.
        """
        cmd = self._command(args)
        command_line = shlex.join(cmd)
        logger.debug("Streaming git command: %s", command_line)

        with tempfile.TemporaryFile() as stderr_file:
            try:
                process = subprocess.Popen(
                    cmd,
                    cwd=cwd,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except OSError as e:
                raise GitCommandError(
                    f"Failed to execute git: {e}", command_line=command_line
                ) from e

            timed_out = threading.Event()

            def expire() -> None:
                timed_out.set()
                process.kill()

            timer = threading.Timer(self.timeout, expire) if self.timeout else None
            if timer is not None:
                timer.daemon = True
                timer.start()

            exhausted = False
            try:
                for line in process.stdout:
                    yield line.rstrip("\r\n")
                exhausted = True
            finally:
                if timer is not None:
                    timer.cancel()
                if not exhausted and process.poll() is None:
                    logger.debug("Stopping git before end of output: %s", command_line)
                    process.kill()
                process.stdout.close()
                exit_code = process.wait()

            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace")

        if timed_out.is_set():
            raise GitCommandError(
                f"git command timed out after {self.timeout} seconds",
                command_line=command_line,
                output=stderr,
            )
        if exit_code != 0:
            logger.debug("git exited with %d: %s", exit_code, stderr.strip())
            raise GitCommandError(
                "git command failed",
                command_line=command_line,
                output=stderr,
                exit_code=exit_code,
            )
