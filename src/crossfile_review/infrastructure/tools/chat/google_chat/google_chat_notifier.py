from typing import Any

from crossfile_review.core.application.ports import NotifierPort
from crossfile_review.core.domain.review import ReviewContext
from crossfile_review.infrastructure.tools.chat.google_chat.google_chat_client import (
    GoogleChatClient,
)


class GoogleChatNotifier(NotifierPort):
    def __init__(self, client: GoogleChatClient) -> None:
        self._client = client

    async def notify_review_completed(
        self, context: ReviewContext, comment_count: int, mr_url: str
    ) -> None:
        await self._client.send(review_card(context, comment_count, mr_url))

    async def notify_error(self, project_name: str, mr_title: str, mr_url: str, error: str) -> None:
        await self._client.send({"text": error_text(project_name, mr_title, mr_url, error)})


# ── Message builders ──────────────────────────────────────────────


def review_card(context: ReviewContext, comment_count: int, mr_url: str) -> dict[str, Any]:
    return {
        "cards": [
            {
                "header": {"title": "Code review complete", "subtitle": context.project_name},
                "sections": [
                    _mr_details_section(context),
                    _review_result_section(context, comment_count),
                    {
                        "widgets": [
                            {
                                "textParagraph": {
                                    "text": "Line comments were posted on the merge request. "
                                    "Open it to see the details."
                                }
                            }
                        ]
                    },
                    {
                        "widgets": [
                            {
                                "buttons": [
                                    {
                                        "textButton": {
                                            "text": "Open MR",
                                            "onClick": {"openLink": {"url": mr_url}},
                                        }
                                    }
                                ]
                            }
                        ]
                    },
                ],
            }
        ]
    }


def _mr_details_section(context: ReviewContext) -> dict[str, Any]:
    return {
        "header": "MR details",
        "widgets": [
            _key_value("Title", context.mr_title),
            _key_value("Author", context.author),
            _key_value("Branch", f"{context.source_branch} → {context.target_branch}"),
        ],
    }


def _review_result_section(context: ReviewContext, comment_count: int) -> dict[str, Any]:
    return {
        "header": "Review result",
        "widgets": [
            _key_value("Line comments", str(comment_count), icon="DESCRIPTION"),
            _key_value("Changed files", str(len(context.files)), icon="BOOKMARK"),
            _key_value(
                "Lines",
                f"+{context.total_additions} -{context.total_deletions}",
                icon="STAR",
            ),
        ],
    }


def _key_value(label: str, content: str, icon: str | None = None) -> dict[str, Any]:
    key_value: dict[str, Any] = {"topLabel": label, "content": content}
    if icon:
        key_value["icon"] = icon
    return {"keyValue": key_value}


def error_text(project_name: str, mr_title: str, mr_url: str, error: str) -> str:
    return (
        "*Code Review Failed*\n\n"
        f"*Project:* {project_name}\n"
        f"*MR:* {mr_title}\n"
        f"*Error:* {error}\n\n"
        f"View MR: {mr_url}"
    )
