"""Rate limiting for the public endpoints."""

import logging
from typing import Optional

from fastapi import FastAPI
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)


def install_rate_limiter(app: FastAPI, rate_limit: Optional[str]) -> Optional[Limiter]:
    """Apply a per-client default limit to every route of the app.

    Args:
        app: The application to protect.
        rate_limit: A limits string such as "120/minute". None disables limiting.

    Returns:
        The installed Limiter, or None when disabled.
    """
    if not rate_limit:
        logger.info("Rate limiting disabled")
        return None
    limiter = Limiter(key_func=get_remote_address, default_limits=[rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
