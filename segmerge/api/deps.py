"""FastAPI dependencies for configuration and authentication."""

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from segmerge.api.errors import unauthorized
from segmerge.config import AppConfig
from segmerge.engine.registry import TagRegistry

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_config(request: Request) -> AppConfig:
    """Return the config the app was built with."""
    return request.app.state.config


def get_registry(request: Request) -> TagRegistry:
    """Return the base tag registry built from the extraction config."""
    return request.app.state.registry


def require_token(
    config: Annotated[AppConfig, Depends(get_config)],
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Check the bearer token sent with a merge request.

    Without a configured token the check is skipped outside production and
    every request is refused in production.
    """
    token = config.auth.api_token
    if not token:
        if not config.is_production:
            logger.warning("No API token configured, skipping auth in non-production mode")
            return
        raise unauthorized("Merge endpoint requires a configured API token")

    if not authorization:
        raise unauthorized("Authorization header required")

    supplied = authorization
    if authorization.startswith(BEARER_PREFIX):
        supplied = authorization[len(BEARER_PREFIX):]
    if not hmac.compare_digest(supplied.encode("utf-8"), token.encode("utf-8")):
        raise unauthorized("Invalid or expired token")


ConfigDep = Annotated[AppConfig, Depends(get_config)]
RegistryDep = Annotated[TagRegistry, Depends(get_registry)]
