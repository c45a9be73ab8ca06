from dataclasses import dataclass, replace

from crossfile_review.core.domain.review.file_change import DiffRefs, FileChange


@dataclass(frozen=True)
class ReviewContext:
    """Everything the review pipeline knows about one merge request."""

    project_name: str
    mr_title: str
    source_branch: str
    target_branch: str
    author: str
    files: tuple[FileChange, ...]
    total_files: int
    total_additions: int = 0
    total_deletions: int = 0
    mr_description: str | None = None
    diff_refs: DiffRefs | None = None

    @property
    def summary(self) -> str:
        return "\n".join(
            [
                f"Project: {self.project_name}",
                f"MR: {self.mr_title}",
                f"Author: {self.author}",
                f"Branch: {self.source_branch} -> {self.target_branch}",
                f"Files changed: {self.total_files} (showing {len(self.files)})",
                f"Lines: +{self.total_additions} -{self.total_deletions}",
            ]
        )

    def with_files(self, files: list[FileChange] | tuple[FileChange, ...]) -> "ReviewContext":
        return replace(self, files=tuple(files))

    def find_file(self, file_path: str) -> FileChange | None:
        return next((f for f in self.files if f.file_path == file_path), None)
