from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .deps import get_config
from .env_settings import get_env
from .errors import ConfigurationError
from .log_config import setup_logging
from .routers import auth as auth_router
from .routers import password as password_router

logger = logging.getLogger(__name__)


def create_app(configure_logging: bool = True) -> FastAPI:
    if configure_logging:
        env = get_env()
        setup_logging(level=env.log_level, retention_days=env.log_retention_days)

    # Fail fast: invalid settings must stop startup, not the first request.
    get_config()

    app = FastAPI(title="Password Portal")
    app.include_router(auth_router.router)
    app.include_router(password_router.router)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error("Misconfiguration while serving %s: %s", request.url.path, exc.message)
        return PlainTextResponse("Service is misconfigured.", status_code=500)

    return app
