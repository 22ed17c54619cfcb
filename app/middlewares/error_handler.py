"""
Error handler middleware for centralized exception handling.

Turns application exceptions into JSON error responses and logs anything
unexpected.
"""

import logging
from typing import Callable

from aiohttp import web
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StudioFlowError,
)

logger = logging.getLogger(__name__)


def status_for(error: StudioFlowError) -> int:
    """HTTP status for an application exception."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, PermissionDeniedError):
        return 403
    if isinstance(error, ConflictError):
        return 409
    return 400


def _pydantic_errors(error: PydanticValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(part) for part in e["loc"]), "error": e["msg"]}
        for e in error.errors()
    ]


@web.middleware
async def error_middleware(request: web.Request, handler: Callable):
    """Catch and map all exceptions raised by handlers."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except PydanticValidationError as e:
        return web.json_response(
            {"error": "Validation error", "details": _pydantic_errors(e)},
            status=400,
        )
    except StudioFlowError as e:
        status = status_for(e)
        logger.info(
            f"{request.method} {request.path} rejected: {e.message}",
            extra={"tenant_id": request.get("tenant_id"), "status": status},
        )
        return web.json_response({"error": e.message}, status=status)
    except Exception as e:
        logger.error(
            f"Unhandled error on {request.method} {request.path}: {e}",
            exc_info=True,
            extra={"tenant_id": request.get("tenant_id"), "method": request.method, "path": request.path},
        )
        return web.json_response({"error": "Internal server error"}, status=500)
