import hmac

from fastapi import Depends, Header, HTTPException, Request, status

from crossfile_review.core.application.exceptions import InvalidWebhookError
from crossfile_review.infrastructure.configuration import AppConfig


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def verify_webhook_token(expected: str | None, provided: str | None) -> None:
    """Raise InvalidWebhookError unless *provided* matches the configured secret.

    A blank secret disables the check.
    """
    if not expected:
        return
    if not provided or not hmac.compare_digest(expected, provided):
        raise InvalidWebhookError("Invalid GitLab webhook token")


async def validate_gitlab_token(
    x_gitlab_token: str | None = Header(default=None, alias="X-Gitlab-Token"),
    config: AppConfig = Depends(get_app_config),
) -> None:
    secret = config.gitlab.webhook_secret
    try:
        verify_webhook_token(secret.get_secret_value() if secret else None, x_gitlab_token)
    except InvalidWebhookError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
