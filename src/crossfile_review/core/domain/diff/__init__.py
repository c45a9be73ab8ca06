from crossfile_review.core.domain.diff.diff_line import NO_NEW_LINE, DiffHunk, DiffLine, LineKind
from crossfile_review.core.domain.diff.diff_parser import changed_lines_with_context, parse_diff

__all__ = [
    "NO_NEW_LINE",
    "DiffHunk",
    "DiffLine",
    "LineKind",
    "changed_lines_with_context",
    "parse_diff",
]
