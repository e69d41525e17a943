"""Parser for ref listings produced by git show-ref and git ls-remote.

Each non-blank line has the form "<sha1><whitespace><refname>", e.g.

    08c471b4f1c4c1f1fcdd506bc291d1c3e7e383d8        refs/tags/1.7.0
    6e1f0a2c3b4d5e6f708192a3b4c5d6e7f8091a2b        refs/tags/1.7.0^{}

Lines ending in "^{}" are dereference entries: they give the commit an
annotated tag object points to. Refs are resolved through them so that
annotated tags target the tagged commit rather than the tag object.
"""

import logging
import re
from collections.abc import Iterable

from typedgit.domain.entities import Ref
from typedgit.domain.exceptions import (
    GitParseError,
    IdentifierFormatError,
    InvalidArgumentError,
)
from typedgit.domain.identifiers import FullRefName, Sha1

logger = logging.getLogger(__name__)

DEREFERENCE_SUFFIX = "^{}"

_FIELD_SEPARATOR = re.compile(r"\s+")


def _split_ref_line(line: str) -> tuple[str, str]:
    """Split a trimmed ref line into (sha1, name).

    Raises:
        GitParseError: If the line does not have two non-empty fields.
    """
    parts = _FIELD_SEPARATOR.split(line, maxsplit=1)
    if len(parts) != 2:
        raise GitParseError(f"Expected '<sha1> <refname>' but got '{line}'", line=line)

    sha1, name = parts[0].strip(), parts[1].strip()
    if not sha1 or not name:
        raise GitParseError(f"Expected '<sha1> <refname>' but got '{line}'", line=line)
    return sha1, name


def parse_ref_lines(lines: Iterable[str]) -> list[Ref]:
    """Parse ref listing lines into Refs.

    Args:
        lines: Output lines of `git show-ref` or `git ls-remote`.

    Returns:
        One Ref per listed name, in input order, with annotated tags
        resolved to the commit they annotate.

    Raises:
        InvalidArgumentError: If lines is None.
        GitParseError: If a line is malformed, holds an invalid sha1 or
            refname, or repeats a name already listed.
    """
    if lines is None:
        raise InvalidArgumentError("lines")

    entries: list[tuple[str, str, str]] = []
    lookup: dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        sha1, name = _split_ref_line(line)
        if name in lookup:
            raise GitParseError(f"Duplicate ref '{name}' in listing", line=line)
        lookup[name] = sha1
        entries.append((name, sha1, line))

    refs: list[Ref] = []
    for name, sha1, line in entries:
        if name.endswith(DEREFERENCE_SUFFIX):
            continue

        target = lookup.get(f"{name}{DEREFERENCE_SUFFIX}", sha1)
        try:
            refs.append(Ref(full_name=FullRefName(name), target=Sha1(target)))
        except IdentifierFormatError as e:
            raise GitParseError(f"Invalid ref line '{line}': {e}", line=line) from e

    logger.debug("Parsed %d refs from %d listing entries", len(refs), len(entries))
    return refs
