"""Parsers that turn git command output into domain records.

Both parsers are pure: they read lines and perform no I/O of their own.
"""

from typedgit.core.parsing.ref_listing import parse_ref_lines
from typedgit.core.parsing.rev_list import parse_rev_list

__all__ = ["parse_ref_lines", "parse_rev_list"]
