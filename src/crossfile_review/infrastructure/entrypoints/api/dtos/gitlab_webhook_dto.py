from typing import Any

from pydantic import BaseModel, ConfigDict


class GitLabUserDTO(BaseModel):
    name: str | None = None
    username: str | None = None


class GitLabProjectDTO(BaseModel):
    id: int
    name: str | None = None
    path_with_namespace: str | None = None
    web_url: str | None = None


class MergeRequestAttributesDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    iid: int
    title: str | None = None
    action: str | None = None
    state: str | None = None
    url: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    draft: bool = False


class GitLabMergeRequestWebhookDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object_kind: str
    event_type: str | None = None
    user: GitLabUserDTO | None = None
    project: GitLabProjectDTO
    object_attributes: MergeRequestAttributesDTO
    changes: dict[str, Any] | None = None

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)
