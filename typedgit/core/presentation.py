"""Text and JSON rendering of refs and commit records for CLI output."""

import json
from collections.abc import Iterable
from typing import Any

from typedgit.domain.entities import CommitRecord, Ref


def ref_to_dict(ref: Ref) -> dict[str, Any]:
    return {
        "name": str(ref.full_name),
        "short_name": str(ref.short_name),
        "target": str(ref.target),
        "is_branch": ref.is_branch,
        "is_tag": ref.is_tag,
    }


def commit_to_dict(commit: CommitRecord) -> dict[str, Any]:
    return {
        "sha1": str(commit.sha1),
        "parents": [str(parent) for parent in commit.parent_sha1s],
        "author": commit.author,
        "author_date": commit.author_date.isoformat(),
        "committer": commit.committer,
        "commit_date": commit.commit_date.isoformat(),
        "message": commit.message,
    }


def format_refs_json(refs: Iterable[Ref]) -> str:
    """Format refs as a JSON array."""
    return json.dumps([ref_to_dict(ref) for ref in refs], indent=2)


def format_ref_line(ref: Ref) -> str:
    """Format a ref the way show-ref prints it."""
    return f"{ref.target} {ref.full_name}"


def format_commit_json_line(commit: CommitRecord) -> str:
    """Format one commit as a single JSON line (JSON Lines output)."""
    return json.dumps(commit_to_dict(commit))


def format_commit_text(commit: CommitRecord, abbreviate: int | None = None) -> str:
    """Format a commit as a short multi-line summary.

    Args:
        commit: The commit to format.
        abbreviate: Show only this many hash characters, or None for full hashes.
    """
    sha1 = str(commit.sha1.abbreviate(abbreviate)) if abbreviate else str(commit.sha1)
    lines = [f"commit {sha1}"]
    if commit.is_merge:
        parents = " ".join(
            str(p.abbreviate(abbreviate)) if abbreviate else str(p)
            for p in commit.parent_sha1s
        )
        lines.append(f"Merge: {parents}")
    lines.append(f"Author: {commit.author}")
    lines.append(f"Date:   {commit.author_date.isoformat()}")
    lines.append("")
    lines.extend(f"    {line}" for line in commit.message_lines)
    return "\n".join(lines)
