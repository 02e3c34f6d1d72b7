from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# Shared limiter instance; tests switch it off with ``limiter.enabled = False``
limiter = Limiter(key_func=get_remote_address)

# Public form endpoints
REVIEW_SUBMIT_LIMIT = "10/minute"
INQUIRY_EMAIL_LIMIT = "5/minute"

__all__ = [
    "limiter",
    "RateLimitExceeded",
    "SlowAPIMiddleware",
    "REVIEW_SUBMIT_LIMIT",
    "INQUIRY_EMAIL_LIMIT",
]
