"""Domain entities built from git output.

Entities are immutable records assembled by the parsers and the
repository facade. Derived values are computed from the stored fields,
never supplied by the caller.
"""

import shlex
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property

from typedgit.domain.exceptions import InvalidArgumentError
from typedgit.domain.identifiers import FullRefName, RefNameComponent, Sha1

BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class Ref:
    """A fully-qualified ref name plus the commit it resolves to.

    Attributes:
        full_name: Fully-qualified name (e.g. "refs/heads/main").
        target: Sha1 of the commit the ref points to. For annotated tags
            this is the tagged commit, not the tag object.
        short_name: Last path component of full_name (derived).
        is_branch: True if full_name is under refs/heads/ (derived).
        is_tag: True if full_name is under refs/tags/ (derived).
    """

    full_name: FullRefName
    target: Sha1
    short_name: RefNameComponent = field(init=False)
    is_branch: bool = field(init=False)
    is_tag: bool = field(init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.full_name, FullRefName):
            raise InvalidArgumentError("full_name", "Ref full_name must be a FullRefName")
        if not isinstance(self.target, Sha1):
            raise InvalidArgumentError("target", "Ref target must be a Sha1")

        name = str(self.full_name)
        object.__setattr__(self, "short_name", self.full_name.short_name)
        object.__setattr__(self, "is_branch", name.startswith(BRANCH_PREFIX))
        object.__setattr__(self, "is_tag", name.startswith(TAG_PREFIX))


@dataclass(frozen=True)
class CommitRecord:
    """Basic information about a commit, as listed by git rev-list.

    Attributes:
        sha1: The commit's object name.
        parent_sha1s: Parent commits in order; empty for root commits or
            when parents were not requested.
        author: Author identity ("Name <email>").
        author_date: Author timestamp with its original UTC offset.
        committer: Committer identity ("Name <email>").
        commit_date: Commit timestamp with its original UTC offset.
        message_lines: Message lines with the indent removed.
    """

    sha1: Sha1
    parent_sha1s: tuple[Sha1, ...]
    author: str
    author_date: datetime
    committer: str
    commit_date: datetime
    message_lines: tuple[str, ...]

    def __post_init__(self) -> None:
        for name in ("sha1", "parent_sha1s", "author", "committer", "message_lines"):
            if getattr(self, name) is None:
                raise InvalidArgumentError(name)
        # Accept any sequence from callers but store tuples.
        object.__setattr__(self, "parent_sha1s", tuple(self.parent_sha1s))
        object.__setattr__(self, "message_lines", tuple(self.message_lines))

    @cached_property
    def message(self) -> str:
        """Full commit message, each line terminated by a newline."""
        return "".join(f"{line}\n" for line in self.message_lines)

    @property
    def subject(self) -> str:
        """First line of the message, or "" for an empty message."""
        return self.message_lines[0] if self.message_lines else ""

    @property
    def is_merge(self) -> bool:
        return len(self.parent_sha1s) > 1


@dataclass(frozen=True)
class CommandResult:
    """Captured result of running an external command.

    Attributes:
        args: Full argument vector, including the program.
        exit_code: Process exit code.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    args: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)

    @property
    def combined_output(self) -> str:
        if self.stdout and self.stderr:
            return f"{self.stdout.rstrip()}\n{self.stderr}"
        return self.stdout or self.stderr

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
