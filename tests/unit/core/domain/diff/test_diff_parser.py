"""Unit tests for the unified diff parser and its context windowing."""

from crossfile_review.core.domain.diff import (
    NO_NEW_LINE,
    DiffLine,
    LineKind,
    changed_lines_with_context,
    parse_diff,
)

TWO_HUNK_DIFF = (
    "@@ -1,3 +1,4 @@\n"
    " package app\n"
    "-fun old() = 1\n"
    "+fun renamed() = 1\n"
    "+fun extra() = 2\n"
    " // end\n"
    "@@ -20,2 +21,2 @@\n"
    " val a = 1\n"
    "-val b = 2\n"
    "+val b = 3\n"
)


class TestParseDiff:
    def test_concrete_single_hunk_scenario(self) -> None:
        hunks = parse_diff("@@ -1,1 +1,2 @@\n line1\n+line2")

        assert len(hunks) == 1
        hunk = hunks[0]
        assert (hunk.old_count, hunk.new_count) == (1, 2)
        assert hunk.lines == (
            DiffLine(new_line=1, old_line=1, content="line1", kind=LineKind.CONTEXT),
            DiffLine(new_line=2, old_line=None, content="line2", kind=LineKind.ADDITION),
        )

    def test_deletions_use_the_no_new_line_sentinel(self) -> None:
        hunk = parse_diff(TWO_HUNK_DIFF)[0]

        deletion = hunk.lines[1]
        assert deletion.kind is LineKind.DELETION
        assert deletion.new_line == NO_NEW_LINE
        assert deletion.old_line == 2

    def test_hunks_keep_file_order_and_line_numbers(self) -> None:
        hunks = parse_diff(TWO_HUNK_DIFF)

        assert [(h.old_start, h.new_start) for h in hunks] == [(1, 1), (20, 21)]
        assert [line.new_line for line in hunks[1].lines] == [21, NO_NEW_LINE, 22]

    def test_omitted_counts_default_to_one(self) -> None:
        hunk = parse_diff("@@ -7 +7 @@\n-a\n+b")[0]

        assert (hunk.old_count, hunk.new_count) == (1, 1)
        assert [line.kind for line in hunk.lines] == [LineKind.DELETION, LineKind.ADDITION]

    def test_no_newline_marker_is_dropped(self) -> None:
        hunk = parse_diff("@@ -1,1 +1,1 @@\n-a\n\\ No newline at end of file\n+b")[0]

        assert [line.content for line in hunk.lines] == ["a", "b"]

    def test_invalid_header_is_skipped_without_failing(self) -> None:
        diff = "@@ garbage @@\n+ignored\n@@ -1,1 +1,1 @@\n-x\n+y"

        hunks = parse_diff(diff)

        assert len(hunks) == 1
        assert hunks[0].lines[1].content == "y"

    def test_line_budget_stops_the_hunk(self) -> None:
        hunk = parse_diff("@@ -1,1 +1,1 @@\n-a\n+b\n+not part of the hunk")[0]

        assert len(hunk.lines) == 2

    def test_header_only_and_empty_input(self) -> None:
        assert parse_diff("") == []
        assert parse_diff("@@ -1,0 +1,0 @@")[0].lines == ()

    def test_net_line_count_matches_header(self) -> None:
        for hunk in parse_diff(TWO_HUNK_DIFF):
            assert hunk.additions - hunk.deletions == hunk.new_count - hunk.old_count

    def test_new_line_numbers_strictly_increase(self) -> None:
        for hunk in parse_diff(TWO_HUNK_DIFF):
            numbers = [line.new_line for line in hunk.lines if line.kind is not LineKind.DELETION]
            assert numbers == sorted(set(numbers))


class TestChangedLinesWithContext:
    def test_window_is_clipped_to_the_hunk(self) -> None:
        lines = changed_lines_with_context(TWO_HUNK_DIFF, 10)

        assert len(lines) == sum(len(h.lines) for h in parse_diff(TWO_HUNK_DIFF))

    def test_no_duplicates_when_windows_overlap(self) -> None:
        lines = changed_lines_with_context(TWO_HUNK_DIFF, 3)

        assert len(lines) == len(set(lines))

    def test_zero_window_returns_only_changes(self) -> None:
        lines = changed_lines_with_context(TWO_HUNK_DIFF, 0)

        assert all(line.is_change for line in lines)
        assert [line.content for line in lines] == [
            "fun old() = 1",
            "fun renamed() = 1",
            "fun extra() = 2",
            "val b = 2",
            "val b = 3",
        ]

    def test_context_is_limited_to_window_size(self) -> None:
        diff = "@@ -1,5 +1,6 @@\n a\n b\n c\n+new\n d\n e"

        lines = changed_lines_with_context(diff, 1)

        assert [line.content for line in lines] == ["c", "new", "d"]

    def test_context_only_diff_yields_nothing(self) -> None:
        assert changed_lines_with_context("@@ -1,1 +1,1 @@\n same", 3) == []
