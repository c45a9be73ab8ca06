import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from crossfile_review.infrastructure.configuration import AppConfig
from crossfile_review.infrastructure.entrypoints.api.gitlab_webhook_router import (
    router as gitlab_webhook_router,
)
from crossfile_review.infrastructure.entrypoints.api.health_router import router as health_router
from crossfile_review.infrastructure.observability import configure_logging, configure_tracing

logger = structlog.get_logger().bind(context_component="app_factory")


def create_app(config: AppConfig) -> FastAPI:
    configure_logging(config.log_level, config.log_format)
    configure_tracing()
    logger.info(
        "Boot diagnostics",
        app_name=config.app_name,
        gitlab_base_url=config.gitlab.base_url,
        gitlab_token_present=config.gitlab.token is not None,
        webhook_secret_present=config.gitlab.webhook_secret is not None,
        llm_models=config.llm.model_priority,
        chunking_enabled=config.review.chunking_enabled,
        google_chat_enabled=config.google_chat.is_configured,
    )

    app = FastAPI(title=config.app_name)
    app.state.config = config

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.error(
            "Request validation failed",
            context_endpoint=str(request.url.path),
            error_type="RequestValidationError",
            error_details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(health_router)
    app.include_router(gitlab_webhook_router, prefix="/api/v1")

    return app
