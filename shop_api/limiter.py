# limiter.py
import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shop_api import settings

log = logging.getLogger(__name__)

# No default limits: only routes decorated with `api_limit` are counted.
limiter = Limiter(key_func=get_remote_address, strategy="fixed-window")


def api_limit(func):
    """Apply the shared API rate limit. Every decorated route draws from one per-IP counter."""
    return limiter.shared_limit(settings.RATE_LIMIT, scope="api")(func)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> PlainTextResponse:
    log.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    return PlainTextResponse(settings.RATE_LIMIT_MESSAGE, status_code=429)
