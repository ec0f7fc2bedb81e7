# hoaxify/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from hoaxify.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.ENABLE_RATE_LIMITING)


def maybe_limit(rule: str):
    """
    Applies a slowapi limit only when ENABLE_RATE_LIMITING is on; decorators
    bind at import time, so the flag is read once per process.
    """
    if not settings.ENABLE_RATE_LIMITING:
        def passthrough(fn):
            return fn
        return passthrough
    return limiter.limit(rule)
