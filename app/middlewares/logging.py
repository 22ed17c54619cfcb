"""
Logging middleware for request/response tracking.

Logs every API request with its status and timing.
"""

import logging
import time
from typing import Callable

from aiohttp import web

logger = logging.getLogger(__name__)


@web.middleware
async def request_logging_middleware(request: web.Request, handler: Callable):
    """Log method, path, status and duration of each request."""
    start_time = time.monotonic()
    status = 500
    try:
        response = await handler(request)
        status = response.status
        return response
    except web.HTTPException as e:
        status = e.status
        raise
    finally:
        duration = time.monotonic() - start_time
        logger.info(
            f"{request.method} {request.path} -> {status} in {duration:.3f}s",
            extra={
                "method": request.method,
                "path": request.path,
                "status": status,
                "duration": round(duration, 4),
                "tenant_id": request.get("tenant_id"),
                "user_id": request.get("user_id"),
            },
        )
