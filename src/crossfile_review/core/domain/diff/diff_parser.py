"""Pure functions for parsing unified diffs into addressable line records.

Malformed input never raises: an unparseable header is skipped and the scan
continues with the next line, so bad input degrades to fewer hunks.
"""

import re

from crossfile_review.core.domain.diff.diff_line import (
    NO_NEW_LINE,
    DiffHunk,
    DiffLine,
    LineKind,
)

_HUNK_HEADER_RE = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_HEADER_PREFIX = "@@"


def parse_diff(diff_text: str) -> list[DiffHunk]:
    """Parse *diff_text* into hunks, in file order."""
    lines = _split_lines(diff_text)
    hunks: list[DiffHunk] = []
    index = 0
    while index < len(lines):
        if not lines[index].startswith(_HEADER_PREFIX):
            index += 1
            continue
        parsed = _parse_hunk(lines, index)
        if parsed is None:
            index += 1
            continue
        hunk, index = parsed
        hunks.append(hunk)
    return hunks


def changed_lines_with_context(diff_text: str, context_lines: int = 3) -> list[DiffLine]:
    """Return every changed line plus up to *context_lines* neighbours on each side.

    Windows are clipped to the enclosing hunk and overlapping windows are merged,
    so each line appears at most once and in diff order.
    """
    result: list[DiffLine] = []
    seen: set[DiffLine] = set()
    for hunk in parse_diff(diff_text):
        last = len(hunk.lines) - 1
        for change_idx in (i for i, line in enumerate(hunk.lines) if line.is_change):
            start = max(0, change_idx - context_lines)
            end = min(last, change_idx + context_lines)
            for line in hunk.lines[start : end + 1]:
                if line not in seen:
                    seen.add(line)
                    result.append(line)
    return result


def _split_lines(diff_text: str) -> list[str]:
    """Split on newlines, tolerating CRLF and ignoring one trailing newline."""
    if not diff_text:
        return []
    lines = [line.removesuffix("\r") for line in diff_text.split("\n")]
    if diff_text.endswith("\n"):
        lines.pop()
    return lines


def _parse_hunk(lines: list[str], start: int) -> tuple[DiffHunk, int] | None:
    """Parse the hunk whose header sits at *start*; return it and the next unread index."""
    match = _HUNK_HEADER_RE.search(lines[start])
    if match is None:
        return None
    old_start, new_start = int(match.group(1)), int(match.group(3))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_count = int(match.group(4)) if match.group(4) is not None else 1

    budget = old_count + new_count
    body: list[DiffLine] = []
    old_line, new_line = old_start, new_start
    index = start + 1
    while index < len(lines) and len(body) < budget:
        raw = lines[index]
        if raw.startswith(_HEADER_PREFIX):
            break
        index += 1
        if raw.startswith("\\"):
            continue
        if raw.startswith("+"):
            body.append(DiffLine(new_line, None, raw[1:], LineKind.ADDITION))
            new_line += 1
        elif raw.startswith("-"):
            body.append(DiffLine(NO_NEW_LINE, old_line, raw[1:], LineKind.DELETION))
            old_line += 1
        else:
            content = raw[1:] if raw.startswith(" ") else raw
            body.append(DiffLine(new_line, old_line, content, LineKind.CONTEXT))
            old_line += 1
            new_line += 1

    hunk = DiffHunk(old_start, old_count, new_start, new_count, tuple(body))
    return hunk, index
