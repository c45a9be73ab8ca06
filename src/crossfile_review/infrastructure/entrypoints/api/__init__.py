from crossfile_review.infrastructure.entrypoints.api.app_factory import create_app
from crossfile_review.infrastructure.entrypoints.api.gitlab_webhook_router import (
    router as gitlab_webhook_router,
)
from crossfile_review.infrastructure.entrypoints.api.health_router import router as health_router

__all__ = ["create_app", "gitlab_webhook_router", "health_router"]
