# workhub/main.py
# Run with: uvicorn workhub.main:create_app --factory
import logging

from fastapi import FastAPI

from workhub.api.v1.api import api_router
from workhub.api.v1.endpoints import auth
from workhub.core.config import Settings, get_settings
from workhub.core.context import build_context
from workhub.core.exceptions import register_exception_handlers
from workhub.core.logging import configure_logging
from workhub.services.email import EmailService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, mailer: EmailService | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="WorkHub API")
    app.state.context = build_context(settings, mailer=mailer)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the WorkHub API"}

    logger.info("WorkHub API ready (database: %s)", settings.DATABASE_URL.split("://", 1)[0])
    return app
