"""Per-client request limits for the /api/ routes (slowapi).

One module-level Limiter so routes can be decorated at import time; the
limit string itself is read per request from whatever configure_limiter()
installed at app startup.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from newsradar.config import Settings

limiter = Limiter(key_func=get_remote_address)

_active = {"limit": "100/15minutes"}


def configure_limiter(settings: Settings) -> None:
    """Apply RATE_LIMIT / RATE_LIMIT_ENABLED and start from empty counters."""
    _active["limit"] = settings.rate_limit
    limiter.enabled = settings.rate_limit_enabled
    limiter.reset()


def api_rate_limit() -> str:
    return _active["limit"]
