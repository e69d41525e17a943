"""Typed access to the git command line.

Validated identifier types, parsers for git's ref and history listings,
and a repository facade that ties them to the git executable.
"""

from typedgit.adapters.git_cmd import GitRepository
from typedgit.core.parsing import parse_ref_lines, parse_rev_list
from typedgit.domain.entities import CommitRecord, Ref
from typedgit.domain.exceptions import (
    GitCommandError,
    GitParseError,
    IdentifierFormatError,
    InvalidArgumentError,
    TypedGitError,
)
from typedgit.domain.identifiers import (
    FullRefName,
    GitUrl,
    RefName,
    RefNameComponent,
    RepositoryName,
    Rev,
    Sha1,
    ShortSha1,
)

__all__ = [
    "CommitRecord",
    "FullRefName",
    "GitCommandError",
    "GitParseError",
    "GitRepository",
    "GitUrl",
    "IdentifierFormatError",
    "InvalidArgumentError",
    "Ref",
    "RefName",
    "RefNameComponent",
    "RepositoryName",
    "Rev",
    "Sha1",
    "ShortSha1",
    "TypedGitError",
    "parse_ref_lines",
    "parse_rev_list",
]
