"""Parser for `git rev-list --format=fuller --date=iso-strict` output.

Each commit is rendered as a fixed block:

    commit <sha1> [<parent-sha1> ...]
    Merge: <short> <short>          (merge commits only)
    Author:     <name> <email>
    AuthorDate: 2024-01-15T10:30:00+02:00
    Commit:     <name> <email>
    CommitDate: 2024-01-15T10:30:00+02:00
    <blank>
        <message line>
        ...
    <blank>

Blocks follow each other directly. The parser is a generator: records
are yielded as each block completes, so callers can stop early without
reading the rest of the input.
"""

from collections.abc import Iterable, Iterator

from typedgit.domain.entities import CommitRecord
from typedgit.domain.exceptions import (
    GitParseError,
    IdentifierFormatError,
    InvalidArgumentError,
)
from typedgit.domain.identifiers import Sha1
from typedgit.domain.value_objects import StrictTimestamp

COMMIT_PREFIX = "commit "
MERGE_PREFIX = "Merge:"
AUTHOR_PREFIX = "Author:"
AUTHOR_DATE_PREFIX = "AuthorDate:"
COMMITTER_PREFIX = "Commit:"
COMMIT_DATE_PREFIX = "CommitDate:"
MESSAGE_INDENT = "    "


class _LineReader:
    """Forward-only cursor over output lines."""

    def __init__(self, lines: Iterator[str]) -> None:
        self._lines = lines
        self.current = ""

    def advance(self) -> bool:
        """Move to the next line, returning False at end of input."""
        try:
            line = next(self._lines)
        except StopIteration:
            return False
        self.current = line.rstrip("\r\n")
        return True

    def require_next(self) -> str:
        """Move to the next line, which must exist."""
        if not self.advance():
            raise GitParseError("Unexpected end of rev-list output")
        return self.current


def _remove_prefix(prefix: str, line: str) -> str:
    if not line.startswith(prefix):
        raise GitParseError(f"Expected '{prefix}' from rev-list but got '{line}'", line=line)
    return line[len(prefix) :]


def _expect_blank(line: str) -> None:
    if line != "":
        raise GitParseError(f"Expected blank line from rev-list but got '{line}'", line=line)


def _parse_commit_line(line: str) -> tuple[Sha1, tuple[Sha1, ...]]:
    """Parse "commit <sha1> [<parent> ...]" into the commit and its parents."""
    hashes = _remove_prefix(COMMIT_PREFIX, line).split(" ")
    try:
        sha1s = tuple(Sha1(h) for h in hashes)
    except IdentifierFormatError as e:
        raise GitParseError(f"Invalid commit line '{line}': {e}", line=line) from e
    return sha1s[0], sha1s[1:]


def _parse_date(prefix: str, line: str):
    text = _remove_prefix(prefix, line).strip()
    try:
        return StrictTimestamp.from_string(text).value
    except ValueError as e:
        raise GitParseError(f"Invalid {prefix} line '{line}': {e}", line=line) from e


def _iter_commit_records(lines: Iterator[str]) -> Iterator[CommitRecord]:
    reader = _LineReader(lines)

    while reader.advance():
        sha1, parent_sha1s = _parse_commit_line(reader.current)

        reader.require_next()
        while reader.current.startswith(MERGE_PREFIX):
            reader.require_next()

        author = _remove_prefix(AUTHOR_PREFIX, reader.current).strip()
        author_date = _parse_date(AUTHOR_DATE_PREFIX, reader.require_next())
        committer = _remove_prefix(COMMITTER_PREFIX, reader.require_next()).strip()
        commit_date = _parse_date(COMMIT_DATE_PREFIX, reader.require_next())
        _expect_blank(reader.require_next())

        message_lines: list[str] = []
        while reader.require_next().startswith(MESSAGE_INDENT):
            message_lines.append(reader.current[len(MESSAGE_INDENT) :])
        _expect_blank(reader.current)

        yield CommitRecord(
            sha1=sha1,
            parent_sha1s=parent_sha1s,
            author=author,
            author_date=author_date,
            committer=committer,
            commit_date=commit_date,
            message_lines=tuple(message_lines),
        )


def parse_rev_list(lines: Iterable[str]) -> Iterator[CommitRecord]:
    """Lazily parse rev-list output into CommitRecords.

    The returned iterator is single-pass; parsing the same output again
    needs a fresh line source.

    Args:
        lines: Output lines, with or without line terminators.

    Returns:
        Iterator yielding one CommitRecord per commit block.

    Raises:
        InvalidArgumentError: If lines is None (raised immediately).
        GitParseError: While iterating, on the first malformed line or if
            the output ends inside a commit block.
    """
    if lines is None:
        raise InvalidArgumentError("lines")
    return _iter_commit_records(iter(lines))
