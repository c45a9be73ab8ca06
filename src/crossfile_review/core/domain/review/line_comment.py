from dataclasses import dataclass
from enum import StrEnum

from crossfile_review.core.domain.review.file_change import DiffRefs, FileChange


class CommentSeverity(StrEnum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    SUGGESTION = "SUGGESTION"
    INFO = "INFO"

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @classmethod
    def from_label(cls, label: str | None) -> "CommentSeverity":
        """Case-insensitive lookup; anything unknown maps to INFO."""
        try:
            return cls((label or "").strip().upper())
        except ValueError:
            return cls.INFO


_ICONS = {
    CommentSeverity.CRITICAL: "🔴",
    CommentSeverity.WARNING: "🟡",
    CommentSeverity.SUGGESTION: "💡",
    CommentSeverity.INFO: "ℹ️",
}


@dataclass(frozen=True)
class LineComment:
    file_path: str
    new_line: int
    severity: CommentSeverity
    comment: str

    @property
    def body(self) -> str:
        return f"{self.severity.icon} **{self.severity.name}**: {self.comment}"


@dataclass(frozen=True)
class DiscussionPosition:
    """Anchor of a line comment inside the merge request diff."""

    base_sha: str
    start_sha: str
    head_sha: str
    new_path: str
    new_line: int
    old_path: str | None = None
    old_line: int | None = None
    position_type: str = "text"

    @classmethod
    def for_comment(
        cls, comment: LineComment, diff_refs: DiffRefs, file_change: FileChange | None
    ) -> "DiscussionPosition":
        if file_change is None:
            old_path: str | None = comment.file_path
        elif file_change.new_file:
            old_path = None
        else:
            old_path = file_change.source_path
        return cls(
            base_sha=diff_refs.base_sha,
            start_sha=diff_refs.start_sha,
            head_sha=diff_refs.head_sha,
            new_path=comment.file_path,
            new_line=comment.new_line,
            old_path=old_path,
        )

    def to_payload(self) -> dict[str, str | int | None]:
        return {
            "base_sha": self.base_sha,
            "start_sha": self.start_sha,
            "head_sha": self.head_sha,
            "position_type": self.position_type,
            "old_path": self.old_path,
            "new_path": self.new_path,
            "old_line": self.old_line,
            "new_line": self.new_line,
        }
