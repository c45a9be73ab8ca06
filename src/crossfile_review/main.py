import uvicorn

from crossfile_review.infrastructure.configuration import AppConfig
from crossfile_review.infrastructure.entrypoints.api.app_factory import create_app


def dev() -> None:
    """Run the development server."""
    config = AppConfig()
    uvicorn.run(
        "crossfile_review.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.log_level.lower(),
    )


# Instantiate global app for ASGI
app = create_app(AppConfig())
