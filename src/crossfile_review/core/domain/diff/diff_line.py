from dataclasses import dataclass, field
from enum import StrEnum

# Deletions have no position in the new file; 0 is a valid GitLab line for empty files.
NO_NEW_LINE = -1


class LineKind(StrEnum):
    ADDITION = "ADDITION"
    DELETION = "DELETION"
    CONTEXT = "CONTEXT"


@dataclass(frozen=True)
class DiffLine:
    """One line inside a hunk, with its marker stripped."""

    new_line: int
    old_line: int | None
    content: str
    kind: LineKind

    @property
    def is_change(self) -> bool:
        return self.kind is not LineKind.CONTEXT


@dataclass(frozen=True)
class DiffHunk:
    """A ``@@ -a,b +c,d @@`` region and its ordered lines."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[DiffLine, ...] = field(default_factory=tuple)

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.DELETION)
