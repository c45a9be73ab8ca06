"""End-to-end review of one merge request: real wiring, mocked GitLab REST and litellm."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
import respx
from httpx import Response
from pydantic import SecretStr

from crossfile_review.infrastructure.configuration import (
    AppConfig,
    GitLabSettings,
    GoogleChatSettings,
    LlmSettings,
    ReviewSettings,
)
from crossfile_review.infrastructure.resolution import run_merge_request_review

API = "https://gitlab.example.com/api/v4"
MR_PATH = f"{API}/projects/7/merge_requests/42"
ACOMPLETION = (
    "crossfile_review.infrastructure.tools.llm.litellm_review_model_adapter.litellm.acompletion"
)

SERVICE_DIFF = (
    "@@ -1,1 +1,1 @@\n"
    "-fun getUser(id: Long): User\n"
    "+fun getUser(id: Long, deleted: Boolean): User"
)

MODEL_REPLY = json.dumps(
    {
        "line_comments": [
            {
                "file_path": "src/UserService.kt",
                "new_line": 1,
                "severity": "critical",
                "comment": "UserApi.kt:3 still calls getUser(id) with one argument.",
            }
        ],
        "summary": "Breaking signature change",
    }
)


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig(
        review=ReviewSettings(),
        gitlab=GitLabSettings(
            GITLAB_BASE_URL="https://gitlab.example.com",
            GITLAB_TOKEN="glpat-integration",
            GITLAB_MAX_ATTEMPTS=1,
            GITLAB_SEARCH_MAX_ATTEMPTS=1,
        ),
        llm=LlmSettings(
            OPENAI_API_KEY=SecretStr("sk-test-key"),
            CODE_REVIEW_LLM_MODEL_PRIORITY=["openai:gpt-4o"],
        ),
        google_chat=GoogleChatSettings(GOOGLE_CHAT_ENABLED=False),
    )


def _mock_gitlab(draft: bool = False) -> dict[str, respx.Route]:
    return {
        "mr": respx.get(MR_PATH).mock(
            return_value=Response(
                200,
                json={
                    "iid": 42,
                    "title": "Add deleted flag to user lookup",
                    "source_branch": "feature/deleted-flag",
                    "target_branch": "main",
                    "web_url": "https://gitlab.example.com/team/app/-/merge_requests/42",
                    "author": {"name": "Dana"},
                    "draft": draft,
                    "diff_refs": {"base_sha": "b1", "start_sha": "s1", "head_sha": "h1"},
                },
            )
        ),
        "changes": respx.get(f"{MR_PATH}/changes").mock(
            return_value=Response(
                200,
                json={
                    "changes": [
                        {
                            "old_path": "src/UserService.kt",
                            "new_path": "src/UserService.kt",
                            "diff": SERVICE_DIFF,
                        }
                    ]
                },
            )
        ),
        "search": respx.get(f"{API}/projects/7/search").mock(
            return_value=Response(
                200,
                json=[{"path": "src/UserApi.kt", "data": "service.getUser(id)", "startline": 3}],
            )
        ),
        "discussions": respx.post(f"{MR_PATH}/discussions").mock(
            return_value=Response(201, json={"id": "d1"})
        ),
        "notes": respx.post(f"{MR_PATH}/notes").mock(return_value=Response(201, json={"id": 1})),
    }


class TestMergeRequestReviewFlow:
    @pytest.mark.asyncio
    @respx.mock
    @patch(ACOMPLETION, new_callable=AsyncMock)
    async def test_breaking_change_is_reviewed_and_commented(
        self, mock_acompletion: AsyncMock, config: AppConfig
    ) -> None:
        mock_acompletion.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=MODEL_REPLY))],
            usage=SimpleNamespace(prompt_tokens=900, completion_tokens=60),
        )
        routes = _mock_gitlab()

        posted = await run_merge_request_review(config, 7, 42)

        assert posted == 1
        assert routes["search"].called

        prompt = mock_acompletion.await_args.kwargs["messages"][1]["content"]
        assert "**Breaking changes detected!**" in prompt
        assert "#### src/UserApi.kt" in prompt

        discussion = json.loads(routes["discussions"].calls.last.request.content)
        assert discussion["body"].startswith("🔴 **CRITICAL**:")
        assert discussion["position"]["new_path"] == "src/UserService.kt"
        assert discussion["position"]["new_line"] == 1
        assert discussion["position"]["head_sha"] == "h1"

        note = json.loads(routes["notes"].calls.last.request.content)["body"]
        assert "- Line comments: 1" in note

    @pytest.mark.asyncio
    @respx.mock
    @patch(ACOMPLETION, new_callable=AsyncMock)
    async def test_draft_merge_request_is_skipped(
        self, mock_acompletion: AsyncMock, config: AppConfig
    ) -> None:
        routes = _mock_gitlab(draft=True)

        assert await run_merge_request_review(config, 7, 42) == 0
        assert not routes["changes"].called
        assert not routes["notes"].called
        mock_acompletion.assert_not_awaited()
