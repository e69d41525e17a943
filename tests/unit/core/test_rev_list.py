"""Tests for the rev-list parser."""

from collections.abc import Iterator
from datetime import timedelta
from itertools import islice

import pytest

from tests.fixtures import REV_LIST_OUTPUT, SINGLE_COMMIT_BLOCK, rev_list_lines
from typedgit.core.parsing import parse_rev_list
from typedgit.domain.exceptions import GitParseError, InvalidArgumentError
from typedgit.domain.identifiers import Sha1


def lines_until(prefix: str, text: str = SINGLE_COMMIT_BLOCK) -> list[str]:
    """Return the lines of text up to and including the first line starting with prefix."""
    result = []
    for line in text.splitlines():
        result.append(line)
        if line.startswith(prefix):
            return result
    raise AssertionError(f"No line starts with {prefix!r}")


class TestSingleCommit:
    """Tests for parsing one well-formed block."""

    def test_two_message_lines_and_one_parent(self) -> None:
        records = list(parse_rev_list(rev_list_lines(SINGLE_COMMIT_BLOCK)))

        assert len(records) == 1
        record = records[0]
        assert record.sha1 == Sha1("b" * 40)
        assert record.parent_sha1s == (Sha1("c" * 40),)
        assert record.message_lines == ("line one", "line two")
        assert record.message == "line one\nline two\n"

    def test_identities_and_dates(self) -> None:
        record = next(parse_rev_list(rev_list_lines(SINGLE_COMMIT_BLOCK)))

        assert record.author == "Alice Example <alice@example.com>"
        assert record.committer == "Bob Example <bob@example.com>"
        assert record.author_date.utcoffset() == timedelta(hours=-5)
        assert record.commit_date.utcoffset() == timedelta(hours=1)
        assert record.author_date.hour == 9

    def test_lines_with_terminators(self) -> None:
        """Line terminators left on by a stream are ignored."""
        lines = SINGLE_COMMIT_BLOCK.splitlines(keepends=True)
        record = next(parse_rev_list(lines))
        assert record.message_lines == ("line one", "line two")

    def test_crlf_terminators(self) -> None:
        lines = [f"{line}\r\n" for line in SINGLE_COMMIT_BLOCK.splitlines()]
        record = next(parse_rev_list(lines))
        assert record.author == "Alice Example <alice@example.com>"

    def test_commit_without_parents(self) -> None:
        text = SINGLE_COMMIT_BLOCK.replace(f" {'c' * 40}", "", 1)
        record = next(parse_rev_list(rev_list_lines(text)))
        assert record.parent_sha1s == ()

    def test_empty_message(self) -> None:
        """A block whose message part is only the closing blank line has no message."""
        lines = lines_until("CommitDate:") + ["", ""]
        records = list(parse_rev_list(lines))
        assert records[0].message_lines == ()
        assert records[0].message == ""

    def test_empty_message_without_closing_blank_at_end(self) -> None:
        """git prints an empty-message commit with no closing blank line."""
        lines = lines_until("CommitDate:") + [""]
        with pytest.raises(GitParseError, match="Unexpected end of rev-list output"):
            list(parse_rev_list(lines))

    def test_empty_message_followed_by_next_commit(self) -> None:
        lines = lines_until("CommitDate:") + [""] + lines_until("commit ")
        with pytest.raises(GitParseError, match="Expected blank line"):
            list(parse_rev_list(lines))


class TestMultipleCommits:
    """Tests for parsing consecutive blocks."""

    def test_all_blocks_parsed_in_order(self) -> None:
        records = list(parse_rev_list(rev_list_lines()))

        assert [r.sha1 for r in records] == [
            Sha1("a" * 40),
            Sha1("b" * 40),
            Sha1("c" * 40),
        ]

    def test_merge_lines_skipped(self) -> None:
        merge = next(parse_rev_list(rev_list_lines()))
        assert merge.is_merge
        assert merge.parent_sha1s == (Sha1("b" * 40), Sha1("e" * 40))
        assert merge.author == "Test User <test@example.com>"

    def test_indented_blank_line_in_body(self) -> None:
        root = list(parse_rev_list(rev_list_lines()))[-1]
        assert root.message_lines == ("Initial commit", "", "With a body line.")
        assert root.subject == "Initial commit"

    def test_zulu_dates(self) -> None:
        root = list(parse_rev_list(rev_list_lines()))[-1]
        assert root.commit_date.utcoffset() == timedelta(0)

    def test_empty_input(self) -> None:
        assert list(parse_rev_list([])) == []

    def test_idempotent(self) -> None:
        """Parsing the same output twice gives equal records."""
        lines = rev_list_lines()
        assert list(parse_rev_list(lines)) == list(parse_rev_list(lines))


class TestLaziness:
    """Tests for incremental parsing."""

    def test_yields_before_reading_whole_input(self) -> None:
        consumed = []

        def source() -> Iterator[str]:
            for line in rev_list_lines():
                consumed.append(line)
                yield line

        first = list(islice(parse_rev_list(source()), 1))

        assert len(first) == 1
        # The merge block plus the start of the next block at most
        assert len(consumed) < len(rev_list_lines())
        assert not any(line.startswith("commit " + "c" * 40) for line in consumed)

    def test_malformed_later_block_does_not_affect_earlier_records(self) -> None:
        lines = rev_list_lines() + ["garbage"]
        records = parse_rev_list(lines)
        assert next(records).sha1 == Sha1("a" * 40)
        next(records)
        next(records)
        with pytest.raises(GitParseError):
            next(records)

    def test_none_raises_immediately(self) -> None:
        """Argument errors are not deferred until iteration."""
        with pytest.raises(InvalidArgumentError):
            parse_rev_list(None)  # type: ignore[arg-type]

    def test_single_pass(self) -> None:
        records = parse_rev_list(rev_list_lines())
        assert len(list(records)) == 3
        assert list(records) == []


class TestMalformedOutput:
    """Tests for fatal parse errors."""

    def test_truncated_after_author_date(self) -> None:
        """Truncation mid-block raises instead of yielding a partial record."""
        with pytest.raises(GitParseError, match="Unexpected end of rev-list output"):
            list(parse_rev_list(lines_until("AuthorDate:")))

    @pytest.mark.parametrize(
        "prefix", ["commit ", "Author:", "Commit:", "CommitDate:", "    line two"]
    )
    def test_truncated_anywhere_inside_block(self, prefix: str) -> None:
        with pytest.raises(GitParseError):
            list(parse_rev_list(lines_until(prefix)))

    def test_missing_commit_prefix(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        lines[0] = lines[0].replace("commit ", "kommit ")
        with pytest.raises(GitParseError, match="Expected 'commit '") as excinfo:
            list(parse_rev_list(lines))
        assert excinfo.value.line == lines[0]

    def test_wrong_header_order(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        lines[1], lines[2] = lines[2], lines[1]
        with pytest.raises(GitParseError, match="Expected 'Author:'"):
            list(parse_rev_list(lines))

    def test_invalid_timestamp(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        lines[2] = "AuthorDate: Tue Jan 2 09:30:00 2024 -0500"
        with pytest.raises(GitParseError, match="Invalid AuthorDate:"):
            list(parse_rev_list(lines))

    def test_missing_blank_after_headers(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        del lines[5]
        with pytest.raises(GitParseError, match="Expected blank line"):
            list(parse_rev_list(lines))

    def test_missing_blank_after_message(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        lines.insert(8, "unindented")
        with pytest.raises(GitParseError, match="Expected blank line"):
            list(parse_rev_list(lines))

    def test_invalid_commit_hash(self) -> None:
        lines = rev_list_lines(SINGLE_COMMIT_BLOCK)
        lines[0] = "commit xyz"
        with pytest.raises(GitParseError, match="Invalid commit line"):
            list(parse_rev_list(lines))
