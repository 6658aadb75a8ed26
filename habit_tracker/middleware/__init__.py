# Middleware package for the Habit Tracker API

from .request_id import RequestIDMiddleware
from .security_headers import SecurityHeadersMiddleware
from .rate_limit import limiter, rate_limit_auth, rate_limit_api_write, rate_limit_share_public, rate_limit_exceeded_handler

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "limiter",
    "rate_limit_auth",
    "rate_limit_api_write",
    "rate_limit_share_public",
    "rate_limit_exceeded_handler",
]
