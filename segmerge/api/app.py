"""FastAPI application factory."""

import logging
import time

from fastapi import FastAPI

from segmerge.api.errors import register_exception_handlers
from segmerge.api.middleware import (
    PayloadLimitMiddleware,
    RequestLoggingMiddleware,
    TimeoutMiddleware,
)
from segmerge.api.routes import router
from segmerge.config import AppConfig, configure_logging, load_config
from segmerge.service import build_registry

logger = logging.getLogger(__name__)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API application.

    Args:
        config: Application config; loaded from ``config.yaml`` and the
            environment when omitted.

    Returns:
        A configured FastAPI instance.
    """
    config = config or load_config()
    configure_logging(config.logging)

    app = FastAPI(
        title=config.app.name,
        description=config.app.description,
        version=config.app.version,
        docs_url="/api-docs",
    )
    app.state.config = config
    app.state.registry = build_registry(config.extraction)
    app.state.started_at = time.monotonic()

    # Last added runs first: logging wraps the timeout, which wraps the size check
    app.add_middleware(PayloadLimitMiddleware, max_bytes=config.server.max_payload_bytes)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=config.server.request_timeout_seconds)
    app.add_middleware(RequestLoggingMiddleware, version=config.app.version)

    register_exception_handlers(app)
    app.include_router(router)

    if not config.auth.api_token:
        logger.warning(
            "API_BEARER_TOKEN is not set; /api/merge is %s",
            "disabled" if config.is_production else "unauthenticated",
        )
    return app
