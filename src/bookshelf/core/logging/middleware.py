"""Request logging middleware.

Emits one ``request_completed`` event per request, tagged with the acting
user when the request carried a valid token. Denied permission checks show
up here as 403 warnings next to the ``authorization_denied`` event.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()

QUIET_PATHS = ("/health/live", "/health/ready", "/docs", "/redoc", "/openapi.json")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request.

    Attributes:
        exclude_paths: Path prefixes that are never logged
    """

    def __init__(self, app: Any, exclude_paths: tuple[str, ...] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self.exclude_paths):
            return await call_next(request)

        start_time = time.perf_counter()
        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
        }

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                duration_ms=_elapsed_ms(start_time),
                **event,
            )
            raise

        event["status_code"] = response.status_code
        event["duration_ms"] = _elapsed_ms(start_time)

        user_id = getattr(request.state, "user_id", None)
        if user_id is not None:
            event["user_id"] = user_id

        if response.status_code >= 500:
            logger.error("request_completed", **event)
        elif response.status_code >= 400:
            logger.warning("request_completed", **event)
        else:
            logger.info("request_completed", **event)

        return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
