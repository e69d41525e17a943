"""Validated git identifier value objects.

Each identifier wraps a string that is checked against its grammar at
construction time, so an instance always holds a valid value. The types
are deliberately independent: a narrower type re-runs its full grammar
instead of trusting a broader one, and conversions between types are
explicit methods.

    Rev ─┬─ RefName ─┬─ RefNameComponent
         │           └─ FullRefName
         └─ ShortSha1 ── Sha1

See https://git-scm.com/docs/gitrevisions for the underlying syntax.
"""

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Union
from urllib.parse import unquote, urlsplit

from typedgit.domain.exceptions import IdentifierFormatError, InvalidArgumentError

_REF_NAME_PATTERN = re.compile(r"[A-Za-z0-9/_.-]+")
_HEX_PATTERN = re.compile(r"[0-9a-f]+")
_REPOSITORY_NAME_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")

SHA1_LENGTH = 40
SHORT_SHA1_MIN_LENGTH = 4

GIT_URL_SCHEMES: frozenset[str] = frozenset({"file", "ssh", "git", "http", "https"})


def _require_str(value: object, type_name: str) -> None:
    if value is None:
        raise InvalidArgumentError("value", f"{type_name} value cannot be None")
    if not isinstance(value, str):
        raise InvalidArgumentError(
            "value",
            f"{type_name} value must be a string, got {type(value).__name__}",
        )


def _check_rev(value: str, type_name: str) -> None:
    _require_str(value, type_name)
    if value == "":
        raise IdentifierFormatError("Empty", type_name, value)
    if value.strip() == "":
        raise IdentifierFormatError("Whitespace-only", type_name, value)


def _check_ref_name(value: str, type_name: str) -> None:
    _check_rev(value, type_name)
    if not _REF_NAME_PATTERN.fullmatch(value):
        raise IdentifierFormatError("Contains invalid characters", type_name, value)
    if value.startswith("/"):
        raise IdentifierFormatError("Starts with path separator", type_name, value)
    if value.endswith("/"):
        raise IdentifierFormatError("Ends with path separator", type_name, value)
    if "//" in value:
        raise IdentifierFormatError(
            "Multiple consecutive path separators", type_name, value
        )


def _check_hex(value: str, type_name: str, min_length: int) -> None:
    _check_rev(value, type_name)
    if len(value) < min_length:
        raise IdentifierFormatError("Too short", type_name, value)
    if len(value) > SHA1_LENGTH:
        raise IdentifierFormatError("Too long", type_name, value)
    if not _HEX_PATTERN.fullmatch(value):
        raise IdentifierFormatError("Contains invalid characters", type_name, value)


class _Identifier:
    """Shared string behaviour for identifier value objects."""

    value: str

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        # Mix in the concrete type so equal text in different types
        # does not have to collide.
        return hash((type(self).__name__, self.value))


@dataclass(frozen=True, order=True)
class Rev(_Identifier):
    """Any string that specifies a commit: a hash, ref, or revision expression.

    Attributes:
        value: Non-empty, non-whitespace-only revision text (e.g. "HEAD~2").

    Raises:
        InvalidArgumentError: If value is None or not a string.
        IdentifierFormatError: If value is empty or whitespace-only.
    """

    value: str

    def __post_init__(self) -> None:
        _check_rev(self.value, "Rev")

    def to_rev(self) -> "Rev":
        return self

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, order=True)
class RefName(_Identifier):
    """A refname: a full path, partial path, or single component.

    Refnames may be ambiguous (e.g. "main" or "heads/main").

    Raises:
        InvalidArgumentError: If value is None or not a string.
        IdentifierFormatError: If value contains characters outside
            [A-Za-z0-9/_.-], or has a leading, trailing or doubled "/".
    """

    value: str

    def __post_init__(self) -> None:
        _check_ref_name(self.value, "RefName")

    def to_rev(self) -> Rev:
        return Rev(self.value)

    @property
    def components(self) -> tuple["RefNameComponent", ...]:
        """The individual path components of the refname."""
        return tuple(RefNameComponent(part) for part in self.value.split("/"))

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, order=True)
class RefNameComponent(_Identifier):
    """A single refname path component, such as a branch or tag name.

    Raises:
        InvalidArgumentError: If value is None or not a string.
        IdentifierFormatError: If value is not a valid refname or contains "/".
    """

    value: str

    def __post_init__(self) -> None:
        _check_ref_name(self.value, "RefNameComponent")
        if "/" in self.value:
            raise IdentifierFormatError(
                "Contains invalid characters", "RefNameComponent", self.value
            )

    @classmethod
    def from_ref_name(cls, ref_name: RefName) -> "RefNameComponent":
        """Narrow a RefName, failing if it has more than one component."""
        return cls(str(ref_name))

    def to_ref_name(self) -> RefName:
        return RefName(self.value)

    def to_rev(self) -> Rev:
        return Rev(self.value)

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, order=True)
class FullRefName(_Identifier):
    """A full, unambiguous refname path such as "refs/heads/main".

    Shares the RefName grammar; the separate type lets signatures demand a
    fully-qualified name.
    """

    value: str

    def __post_init__(self) -> None:
        _check_ref_name(self.value, "FullRefName")

    @classmethod
    def from_ref_name(cls, ref_name: RefName) -> "FullRefName":
        """Mark a RefName as fully qualified."""
        return cls(str(ref_name))

    @classmethod
    def for_branch(cls, name: RefNameComponent) -> "FullRefName":
        return cls(f"refs/heads/{name}")

    @classmethod
    def for_tag(cls, name: RefNameComponent) -> "FullRefName":
        return cls(f"refs/tags/{name}")

    @property
    def short_name(self) -> RefNameComponent:
        """The last path component (e.g. "main" for "refs/heads/main")."""
        return RefNameComponent(self.value.rsplit("/", 1)[-1])

    def to_ref_name(self) -> RefName:
        return RefName(self.value)

    def to_rev(self) -> Rev:
        return Rev(self.value)

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, order=True)
class ShortSha1(_Identifier):
    """A possibly-abbreviated hexadecimal sha1 object name (4-40 characters).

    Raises:
        InvalidArgumentError: If value is None or not a string.
        IdentifierFormatError: If value is too short, too long, or not
            lowercase hex.
    """

    value: str

    def __post_init__(self) -> None:
        _check_hex(self.value, "ShortSha1", SHORT_SHA1_MIN_LENGTH)

    def to_rev(self) -> Rev:
        return Rev(self.value)

    def is_prefix_of(self, sha1: "Sha1") -> bool:
        return sha1.value.startswith(self.value)

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, order=True)
class Sha1(_Identifier):
    """A full 40-character lowercase hexadecimal sha1 object name."""

    value: str

    def __post_init__(self) -> None:
        _check_hex(self.value, "Sha1", SHA1_LENGTH)

    @classmethod
    def from_rev(cls, rev: Rev) -> "Sha1":
        """Narrow a Rev, failing unless it is a full sha1."""
        return cls(str(rev))

    @classmethod
    def from_short_sha1(cls, short_sha1: ShortSha1) -> "Sha1":
        """Narrow a ShortSha1, failing unless it has all 40 characters."""
        return cls(str(short_sha1))

    def to_short_sha1(self) -> ShortSha1:
        return ShortSha1(self.value)

    def to_rev(self) -> Rev:
        return Rev(self.value)

    def abbreviate(self, length: int = 7) -> ShortSha1:
        """Return the first `length` characters as a ShortSha1."""
        return ShortSha1(self.value[:length])

    __hash__ = _Identifier.__hash__


@dataclass(frozen=True, eq=False)
class RepositoryName:
    """A git repository name. Comparison is case-insensitive.

    Raises:
        InvalidArgumentError: If value is None or not a string.
        IdentifierFormatError: If value contains characters outside [A-Za-z0-9_.-].
    """

    value: str

    def __post_init__(self) -> None:
        _require_str(self.value, "RepositoryName")
        if self.value == "":
            raise IdentifierFormatError("Empty", "RepositoryName", self.value)
        if not _REPOSITORY_NAME_PATTERN.fullmatch(self.value):
            raise IdentifierFormatError(
                "Contains invalid characters", "RepositoryName", self.value
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RepositoryName):
            return NotImplemented
        return self.value.upper() == other.value.upper()

    def __hash__(self) -> int:
        return hash(("RepositoryName", self.value.upper()))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GitUrl:
    """A git repository URL.

    Only absolute URLs with a file, ssh, git, http or https scheme are
    accepted. Query and fragment components are rejected.

    Attributes:
        value: The URL string.
        repository_name: Final path component minus any extension.
    """

    value: str
    repository_name: RepositoryName = field(init=False, compare=False)

    def __post_init__(self) -> None:
        _require_str(self.value, "GitUrl")
        if self.value.strip() == "":
            raise IdentifierFormatError("Empty", "GitUrl", self.value)

        parts = urlsplit(self.value)
        if not parts.scheme or not (parts.netloc or parts.path.startswith("/")):
            raise IdentifierFormatError("Not an absolute URL", "GitUrl", self.value)
        if parts.scheme.lower() not in GIT_URL_SCHEMES:
            raise IdentifierFormatError("Invalid Git URL scheme", "GitUrl", self.value)
        if parts.query:
            raise IdentifierFormatError(
                "Query components are not permitted in Git URLs", "GitUrl", self.value
            )
        if parts.fragment:
            raise IdentifierFormatError(
                "Fragment components are not permitted in Git URLs",
                "GitUrl",
                self.value,
            )

        stem = PurePosixPath(unquote(parts.path)).stem
        if not stem:
            raise IdentifierFormatError(
                "No repository name in path", "GitUrl", self.value
            )
        object.__setattr__(self, "repository_name", RepositoryName(stem))

    @property
    def scheme(self) -> str:
        return urlsplit(self.value).scheme.lower()

    def __str__(self) -> str:
        return self.value


RevLike = Union[str, Rev, RefName, RefNameComponent, FullRefName, ShortSha1, Sha1]


def as_rev(value: RevLike) -> Rev:
    """Widen any commit-identifying value to a Rev.

    Args:
        value: A string or any identifier that names a commit.

    Returns:
        Rev wrapping the same text.

    Raises:
        InvalidArgumentError: If value is None or of an unsupported type.
        IdentifierFormatError: If value is a string that is not a valid Rev.
    """
    if value is None:
        raise InvalidArgumentError("rev", "A revision is required")
    if isinstance(value, str):
        return Rev(value)
    if isinstance(value, (Rev, RefName, RefNameComponent, FullRefName, ShortSha1, Sha1)):
        return value.to_rev()
    raise InvalidArgumentError(
        "rev", f"Cannot use {type(value).__name__} as a revision"
    )
