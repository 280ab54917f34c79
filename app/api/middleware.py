"""
Request timing and logging middleware
"""
import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log request timing and acting user for performance monitoring

    The live feed, review queue and calendar are polled every few seconds,
    so their latency shows up here first.
    """
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        user_id = request.headers.get('X-User-ID', 'anonymous')

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[TIMING] {request.method} {request.url.path} | user_id={user_id} | "
            f"duration={duration_ms:.2f}ms | status={response.status_code}"
        )

        return response
