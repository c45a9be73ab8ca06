from dataclasses import dataclass

from crossfile_review.core.domain.review.file_change import DiffRefs


@dataclass(frozen=True)
class MergeRequest:
    iid: int
    title: str
    source_branch: str
    target_branch: str
    web_url: str
    author: str
    description: str | None = None
    draft: bool = False
    work_in_progress: bool = False
    diff_refs: DiffRefs | None = None

    @property
    def is_draft(self) -> bool:
        return self.draft or self.work_in_progress

    @property
    def project_name(self) -> str:
        """Namespace path taken from the web URL, e.g. ``gitlab.com/group/app``."""
        without_scheme = self.web_url.split("://", 1)[-1]
        for marker in ("/-/merge_requests", "/merge_requests"):
            if marker in without_scheme:
                return without_scheme.split(marker, 1)[0]
        return without_scheme
