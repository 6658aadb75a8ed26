import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from habit_tracker.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns every request an ID for log correlation.

    An incoming X-Correlation-ID or X-Request-ID header is reused, otherwise a
    UUID4 is generated. The ID is stored on request.state, set in the logging
    context and echoed back in the X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = (
            request.headers.get("X-Correlation-ID") or
            request.headers.get("X-Request-ID") or
            str(uuid.uuid4())
        )

        request.state.request_id = request_id
        set_request_context(request_id)

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            request_id=request_id
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",
                request_id=request_id
            )
            return response

        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path} - Error: {str(e)}",
                request_id=request_id
            )
            raise
        finally:
            clear_request_context()
