"""Git repository facade built on the git command line.

Each operation runs one git command through a GitRunner, checks its exit
code, and converts the output into typed identifiers and records.
"""

import logging
import shlex
from collections import deque
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path

from typedgit.adapters.git_cmd.runner import SubprocessGitRunner
from typedgit.core.parsing import parse_ref_lines, parse_rev_list
from typedgit.domain.config import GitConfig
from typedgit.domain.entities import CommandResult, CommitRecord, Ref
from typedgit.domain.exceptions import (
    GitCommandError,
    GitParseError,
    InvalidArgumentError,
    NotARepositoryError,
    UncommittedChangesError,
)
from typedgit.domain.identifiers import (
    SHA1_LENGTH,
    SHORT_SHA1_MIN_LENGTH,
    FullRefName,
    GitUrl,
    RefName,
    RefNameComponent,
    RepositoryName,
    RevLike,
    Sha1,
    ShortSha1,
    as_rev,
)
from typedgit.ports.git import GitRunner

logger = logging.getLogger(__name__)

# Lines of rev-list output kept for parse error diagnostics
REV_LIST_ERROR_CONTEXT = 20

HEAD = "HEAD"


def _require(value: object, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(name)


def _runner_for(runner: GitRunner | None, config: GitConfig | None) -> GitRunner:
    if runner is not None:
        return runner
    config = config or GitConfig()
    return SubprocessGitRunner(program=config.program, timeout=config.timeout)


class GitRepository:
    """A git working tree on the local filesystem.

    Args:
        path: Path to the repository root.
        runner: GitRunner used to execute commands. Defaults to a
                SubprocessGitRunner built from config.
        config: Git invocation settings.

    Raises:
        InvalidArgumentError: If path is None.
        NotARepositoryError: If path is not a git repository.
    """

    def __init__(
        self,
        path: Path | str,
        runner: GitRunner | None = None,
        config: GitConfig | None = None,
    ) -> None:
        _require(path, "path")
        resolved = Path(path).resolve()
        if not self.is_repository(resolved):
            raise NotARepositoryError(resolved)

        self._path = resolved
        self._config = config or GitConfig()
        self._runner = _runner_for(runner, self._config)

    # ------------------------------------------------------------------
    # Locating and creating repositories
    # ------------------------------------------------------------------

    @staticmethod
    def is_repository(path: Path | str) -> bool:
        """Check whether path is the root of a git working tree."""
        _require(path, "path")
        path = Path(path)
        return path.is_dir() and (path / ".git").exists()

    @classmethod
    def find_containing_repository(
        cls,
        path: Path | str,
        runner: GitRunner | None = None,
        config: GitConfig | None = None,
    ) -> "GitRepository | None":
        """Locate the repository that contains path.

        Args:
            path: A file or directory, possibly nested inside a repository.

        Returns:
            The innermost enclosing repository, or None if path is not
            inside one.
        """
        _require(path, "path")
        start = Path(path).resolve()
        for candidate in (start, *start.parents):
            if cls.is_repository(candidate):
                return cls(candidate, runner=runner, config=config)
        return None

    @classmethod
    def clone(
        cls,
        parent_path: Path | str,
        url: GitUrl,
        runner: GitRunner | None = None,
        config: GitConfig | None = None,
    ) -> "GitRepository":
        """Clone a repository into a new directory under parent_path.

        The directory is named after the final URL path component, minus
        any ".git" extension.

        Raises:
            InvalidArgumentError: If an argument is None.
            ValueError: If parent_path does not exist.
            GitCommandError: If git clone fails.
        """
        _require(parent_path, "parent_path")
        _require(url, "url")
        parent = Path(parent_path).resolve()
        if not parent.is_dir():
            raise ValueError(f"Parent path doesn't exist: {parent}")

        directory_name = Path(str(url).rstrip("/")).name
        if directory_name.lower().endswith(".git"):
            directory_name = directory_name[:-4]

        git = _runner_for(runner, config)
        result = git.run(["-C", str(parent), "clone", str(url)])
        if not result.succeeded:
            raise GitCommandError.from_result("Cloning repository failed", result)

        logger.info("Cloned %s into %s", url, parent / directory_name)
        return cls(parent / directory_name, runner=runner, config=config)

    @classmethod
    def init(
        cls,
        path: Path | str,
        runner: GitRunner | None = None,
        config: GitConfig | None = None,
    ) -> "GitRepository":
        """Initialise a new repository, creating path if needed.

        Raises:
            InvalidArgumentError: If path is None.
            ValueError: If path is already a git repository.
            GitCommandError: If git init fails.
        """
        _require(path, "path")
        target = Path(path).resolve()
        target.mkdir(parents=True, exist_ok=True)
        if cls.is_repository(target):
            raise ValueError(f"Path is already a git repository: {target}")

        git = _runner_for(runner, config)
        result = git.run(["-C", str(target), "init"])
        if not result.succeeded:
            raise GitCommandError.from_result("Initialising repository failed", result)

        return cls(target, runner=runner, config=config)

    @property
    def path(self) -> Path:
        """Absolute path to the repository."""
        return self._path

    @property
    def name(self) -> RepositoryName:
        """Name of the repository, from its directory name.

        Raises:
            IdentifierFormatError: If the directory name is not a valid
                repository name.
        """
        return RepositoryName(self._path.name)

    def __repr__(self) -> str:
        return f"GitRepository({str(self._path)!r})"

    # ------------------------------------------------------------------
    # Command helpers
    # ------------------------------------------------------------------

    def _args(self, *args: str) -> list[str]:
        return ["-C", str(self._path), *args]

    def _git(self, *args: str) -> CommandResult:
        return self._runner.run(self._args(*args))

    def _git_checked(self, message: str, *args: str) -> CommandResult:
        result = self._git(*args)
        if not result.succeeded:
            raise GitCommandError.from_result(message, result)
        return result

    def _list_refs(self, message: str, *args: str, empty_ok: bool = False) -> list[Ref]:
        result = self._git(*args)
        # show-ref exits 1 when there is nothing to show
        if not (result.succeeded or (empty_ok and result.exit_code == 1)):
            raise GitCommandError.from_result(message, result)
        try:
            return parse_ref_lines(result.stdout.splitlines())
        except GitParseError as e:
            raise GitCommandError.from_result(f"{message}: {e.message}", result) from e

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def exists(self, rev: RevLike) -> bool:
        """Determine whether rev resolves to a commit in the repository."""
        return self.try_get_commit_id(rev) is not None

    def try_get_commit_id(self, rev: RevLike) -> Sha1 | None:
        """Resolve rev to a commit sha1, or None if it does not resolve."""
        rev = as_rev(rev)
        try:
            return self.get_commit_id(rev)
        except GitCommandError:
            return None

    def get_commit_id(self, rev: RevLike = HEAD) -> Sha1:
        """Resolve a rev to a commit sha1.

        Args:
            rev: Revision to resolve. Default: HEAD.

        Returns:
            Full sha1 of the commit.

        Raises:
            GitCommandError: If rev does not name a commit.
        """
        rev = as_rev(rev)
        result = self._git_checked(
            "Resolve rev to commit sha1 failed",
            "rev-parse", "-q", "--verify", f"{rev}^{{commit}}",
        )
        return Sha1(result.stdout.strip())

    def get_short_commit_id(self, rev: RevLike = HEAD, minimum_length: int = 0) -> ShortSha1:
        """Resolve a rev to an abbreviated commit sha1.

        Args:
            rev: Revision to resolve. Default: HEAD.
            minimum_length: Minimum abbreviation length (4-40), or 0 to let
                            git choose.

        Raises:
            ValueError: If minimum_length is out of range.
            GitCommandError: If rev does not name a commit.
        """
        rev = as_rev(rev)
        if minimum_length != 0 and not (
            SHORT_SHA1_MIN_LENGTH <= minimum_length <= SHA1_LENGTH
        ):
            raise ValueError(
                f"minimum_length must be 0 or between {SHORT_SHA1_MIN_LENGTH} "
                f"and {SHA1_LENGTH}, got {minimum_length}"
            )

        length = "auto" if minimum_length == 0 else str(minimum_length)
        result = self._git_checked(
            "Resolve rev to short commit sha1 failed",
            "rev-parse", f"--short={length}", f"{rev}^{{commit}}",
        )
        return ShortSha1(result.stdout.strip())

    # ------------------------------------------------------------------
    # Refs
    # ------------------------------------------------------------------

    def get_branch(self) -> RefName | None:
        """Get the name of the checked-out branch, or None if HEAD is detached.

        Branch names may contain "/" so a RefName is returned rather than
        a single component.
        """
        result = self._git_checked(
            "Get current branch failed", "rev-parse", "--abbrev-ref", HEAD
        )
        branch_name = result.stdout.strip()
        if branch_name == HEAD:
            return None
        return RefName(branch_name)

    def get_branches(self) -> list[Ref]:
        """Get local branches and the commits they point to."""
        return self._list_refs("Get branches failed", "show-ref", "--heads", empty_ok=True)

    def get_remote_branches(self) -> list[Ref]:
        """Get branches on the default upstream remote."""
        return self._list_refs("Get remote branches failed", "ls-remote", "--heads")

    def get_refs(self) -> list[Ref]:
        """Get all local refs, including HEAD, with tags dereferenced."""
        return self._list_refs(
            "Get refs failed", "show-ref", "--head", "--dereference", empty_ok=True
        )

    def get_remote_refs(self) -> list[Ref]:
        """Get all refs on the default upstream remote."""
        return self._list_refs("Get remote refs failed", "ls-remote")

    def get_tags(self) -> list[Ref]:
        """Get local tags, annotated tags resolved to their commits."""
        return self._list_refs(
            "Get tags failed", "show-ref", "--tags", "--dereference", empty_ok=True
        )

    def get_remote_tags(self) -> list[Ref]:
        """Get tags on the default upstream remote."""
        return self._list_refs("Get remote tags failed", "ls-remote", "--tags")

    def create_branch(self, name: RefNameComponent, target: RevLike = HEAD) -> None:
        """Create a branch at target. Fails if the branch already exists."""
        _require(name, "name")
        target = as_rev(target)
        self._git_checked("Create branch failed", "branch", str(name), str(target))

    def create_or_move_branch(self, name: RefNameComponent, target: RevLike = HEAD) -> None:
        """Create a branch at target, or move it there if it already exists."""
        _require(name, "name")
        target = as_rev(target)
        self._git_checked(
            "Create or move branch failed", "branch", "-f", str(name), str(target)
        )

    def create_symbolic_branch(
        self, name: RefNameComponent, target: RefNameComponent
    ) -> None:
        """Create a branch that is a symbolic reference to another branch.

        Raises:
            GitCommandError: If a branch called name already exists.
        """
        _require(name, "name")
        _require(target, "target")
        ref_name = FullRefName.for_branch(name)
        target_ref_name = FullRefName.for_branch(target)

        # Match create_branch, which fails for an existing branch
        if any(ref.full_name == ref_name for ref in self.get_branches()):
            raise GitCommandError(f"A branch named '{name}' already exists")

        self.create_symbolic_reference(ref_name, target_ref_name)

    def is_symbolic_branch(self, name: RefNameComponent) -> bool:
        """Check whether a branch is actually a symbolic reference."""
        _require(name, "name")
        return self.is_symbolic_reference(FullRefName.for_branch(name))

    def delete_branch(self, name: RefNameComponent) -> None:
        """Delete a branch, or the symbolic reference of that name."""
        _require(name, "name")
        ref_name = FullRefName.for_branch(name)
        if self.is_symbolic_reference(ref_name):
            self.delete_symbolic_reference(ref_name)
            return
        self._git_checked("Delete branch failed", "branch", "-D", str(name))

    def create_tag(self, name: RefNameComponent, target: RevLike = HEAD) -> None:
        """Create a lightweight tag at target."""
        _require(name, "name")
        target = as_rev(target)
        self._git_checked("Create tag failed", "tag", str(name), str(target))

    def delete_tag(self, name: RefNameComponent) -> None:
        _require(name, "name")
        self._git_checked("Delete tag failed", "tag", "-d", str(name))

    def create_symbolic_reference(self, name: FullRefName, target: FullRefName) -> None:
        _require(name, "name")
        _require(target, "target")
        self._git_checked(
            "Create symbolic ref failed", "symbolic-ref", str(name), str(target)
        )

    def delete_symbolic_reference(self, name: FullRefName) -> None:
        _require(name, "name")
        self._git_checked(
            "Delete symbolic ref failed", "symbolic-ref", "--delete", str(name)
        )

    def find_symbolic_reference_target(self, name: FullRefName) -> FullRefName | None:
        """Return what a symbolic reference points to, or None if it is not one."""
        _require(name, "name")
        result = self._git("symbolic-ref", "-q", str(name))
        if not result.succeeded:
            return None
        return FullRefName(result.stdout.strip())

    def is_symbolic_reference(self, name: FullRefName) -> bool:
        return self.find_symbolic_reference_target(name) is not None

    # ------------------------------------------------------------------
    # Working tree
    # ------------------------------------------------------------------

    def has_uncommitted_changes(self) -> bool:
        """Check for staged or unstaged changes of any kind, including untracked files."""
        result = self._git_checked(
            "Uncommitted changes check failed", "status", "--porcelain"
        )
        return result.combined_output.strip() != ""

    def stage_changes(self) -> None:
        """Stage all uncommitted changes."""
        self._git_checked("Stage uncommitted changes failed", "add", "-A")

    def commit(self, message: str) -> None:
        """Commit staged changes with message."""
        _require(message, "message")
        if not message.strip():
            raise ValueError("Commit message cannot be empty")
        self._git_checked("Commit failed", "commit", "-m", message)

    def checkout(self, rev: RevLike) -> None:
        """Check out a commit, branch or tag.

        Raises:
            UncommittedChangesError: If the working tree has uncommitted changes.
            GitCommandError: If the checkout fails.
        """
        rev = as_rev(rev)
        if self.has_uncommitted_changes():
            raise UncommittedChangesError(
                "Repository contains uncommitted changes",
                hint="Commit or stash your changes before checking out",
            )
        self._git_checked("Checkout failed", "checkout", str(rev))

    def is_ignored(self, path: Path | str) -> bool:
        """Determine whether a file or directory in the repository is ignored."""
        _require(path, "path")
        if not str(path).strip():
            raise ValueError("path cannot be empty")

        result = self._git("check-ignore", "-q", str(path))
        if result.exit_code == 0:
            return True
        if result.exit_code == 1:
            return False
        raise GitCommandError.from_result("check-ignore failed", result)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def rev_list(
        self,
        rev: RevLike = HEAD,
        max_count: int = -1,
        include_parents: bool = True,
    ) -> Iterator[CommitRecord]:
        """List commits reachable from rev, newest first.

        git is started on first iteration and stopped if iteration ends
        early, so taking the first few records does not read the whole
        history.

        Args:
            rev: Revision or range expression (e.g. "v1.0..HEAD").
            max_count: Maximum number of commits, or -1 for all.
            include_parents: Include parent sha1s in each record.

        Returns:
            Lazy iterator of CommitRecords.

        Raises:
            ValueError: If max_count is less than -1 (raised immediately).
            GitCommandError: While iterating, if git fails or its output
                cannot be parsed.
        """
        rev = as_rev(rev)
        if max_count < -1:
            raise ValueError(f"max_count must be -1 or greater, got {max_count}")

        args = self._args("rev-list", "--format=fuller", "--date=iso-strict")
        if include_parents:
            args.append("--parents")
        if max_count >= 0:
            args.append(f"--max-count={max_count}")
        args.append(str(rev))
        return self._iter_rev_list(args)

    def _iter_rev_list(self, args: list[str]) -> Iterator[CommitRecord]:
        lines = self._runner.stream_lines(args)
        recent: deque[str] = deque(maxlen=REV_LIST_ERROR_CONTEXT)

        def remember(source: Iterable[str]) -> Iterator[str]:
            for line in source:
                recent.append(line)
                yield line

        try:
            yield from parse_rev_list(remember(lines))
        except GitParseError as e:
            raise GitCommandError(
                f"Parsing rev-list output failed: {e.message}",
                command_line=shlex.join([self._config.program, *args]),
                output="\n".join(recent),
            ) from e
        finally:
            lines.close()

    def is_ancestor(self, ancestor: RevLike, descendant: RevLike) -> bool:
        """Check whether ancestor is an ancestor of (or equal to) descendant."""
        ancestor = as_rev(ancestor)
        descendant = as_rev(descendant)
        result = self._git("merge-base", "--is-ancestor", str(ancestor), str(descendant))
        if result.exit_code == 0:
            return True
        if result.exit_code == 1:
            return False
        raise GitCommandError.from_result("merge-base --is-ancestor failed", result)

    def list_commits(self, from_rev: RevLike | None, to_rev: RevLike) -> list[Sha1]:
        """List commit sha1s from one commit to another, oldest first.

        Args:
            from_rev: Starting commit (excluded), or None to list from the
                      beginning of history.
            to_rev: Final commit (included).
        """
        to_rev = as_rev(to_rev)
        rev = f"{as_rev(from_rev)}..{to_rev}" if from_rev is not None else str(to_rev)
        sha1s = [commit.sha1 for commit in self.rev_list(rev, include_parents=False)]
        sha1s.reverse()
        return sha1s

    def distance(self, from_rev: RevLike | None, to_rev: RevLike) -> int:
        """Count commits from from_rev (exclusive, None for the root) to to_rev."""
        return len(self.list_commits(from_rev, to_rev))

    def _single_commit(self, rev: RevLike) -> CommitRecord:
        records = list(self.rev_list(rev, max_count=1))
        if len(records) != 1:
            raise GitCommandError(f"Expected exactly one commit for '{rev}', got {len(records)}")
        return records[0]

    def get_commit(self, rev: RevLike = HEAD) -> CommitRecord:
        """Get the record of a single commit."""
        return self._single_commit(rev)

    def get_committer_date(self, rev: RevLike = HEAD) -> datetime:
        return self._single_commit(rev).commit_date

    def get_commit_message(self, rev: RevLike = HEAD) -> str:
        return self._single_commit(rev).message

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------

    def push(
        self,
        refs: Iterable[FullRefName],
        remote: str | None = None,
        dry_run: bool = False,
    ) -> str:
        """Atomically push branches and/or tags to a remote.

        Args:
            refs: Fully-qualified names of the refs to push.
            remote: Remote name. Default: the configured default remote.
            dry_run: Show what would be pushed without pushing.

        Returns:
            Combined git output, or "" if refs is empty.

        Raises:
            GitCommandError: If the push fails.
        """
        _require(refs, "refs")
        refs = list(refs)
        remote = remote if remote is not None else self._config.default_remote
        if not remote.strip():
            raise ValueError("remote cannot be empty")
        if not refs:
            return ""

        args = ["push", "--atomic"]
        if dry_run:
            args.append("--dry-run")
        args.append(remote)
        args.extend(str(ref) for ref in refs)

        result = self._git_checked("Push failed", *args)
        return result.combined_output
