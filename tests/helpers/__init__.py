"""Test helper utilities for the typedgit test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_output_matches,
    parse_json_lines,
    parse_json_output,
)

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_matches",
    "assert_output_contains",
    "assert_error_message",
    "parse_json_output",
    "parse_json_lines",
]
