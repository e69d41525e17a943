"""Test fixtures module."""

from tests.fixtures.git_output import (
    LS_REMOTE_LISTING,
    REF_LISTING,
    REV_LIST_OUTPUT,
    SINGLE_COMMIT_BLOCK,
    rev_list_lines,
)

__all__ = [
    "LS_REMOTE_LISTING",
    "REF_LISTING",
    "REV_LIST_OUTPUT",
    "SINGLE_COMMIT_BLOCK",
    "rev_list_lines",
]
