from crossfile_review.infrastructure.tools.vcs.gitlab.gitlab_client import GitLabClient
from crossfile_review.infrastructure.tools.vcs.gitlab.gitlab_code_search_adapter import (
    GitLabCodeSearchAdapter,
)
from crossfile_review.infrastructure.tools.vcs.gitlab.gitlab_merge_request_adapter import (
    GitLabMergeRequestAdapter,
)

__all__ = ["GitLabClient", "GitLabCodeSearchAdapter", "GitLabMergeRequestAdapter"]
