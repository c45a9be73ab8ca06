from crossfile_review.infrastructure.tools.chat.google_chat.google_chat_client import (
    GoogleChatClient,
)
from crossfile_review.infrastructure.tools.chat.google_chat.google_chat_notifier import (
    GoogleChatNotifier,
)

__all__ = ["GoogleChatClient", "GoogleChatNotifier"]
