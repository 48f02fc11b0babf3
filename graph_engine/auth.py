"""Shared-token check for the internal graph routes."""
import hmac
import logging

from fastapi import HTTPException, Request

from . import config

logger = logging.getLogger(__name__)


def verify_token(token: str | None) -> bool:
    """True if ``token`` matches the configured service token. An unset service token matches nothing."""
    expected = config.GRAPH_SERVICE_TOKEN
    if not token or not expected:
        return False
    return hmac.compare_digest(token.encode(), expected.encode())


def require_graph_token(request: Request) -> None:
    """FastAPI dependency: raises 401 unless the request carries the service token."""
    if not verify_token(request.headers.get(config.TOKEN_HEADER)):
        logger.warning("Rejected %s %s: bad or missing %s", request.method, request.url.path, config.TOKEN_HEADER)
        raise HTTPException(401, "Unauthorized")
