"""API authentication middleware: shared token and tenant headers."""
import hmac
import logging
from typing import Callable

from aiohttp import web

from core.exceptions import TenantRequiredError, ValidationError

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/health"})


def _int_header(request: web.Request, name: str) -> int | None:
    raw = request.headers.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(name, "must be an integer")


@web.middleware
async def api_auth_middleware(request: web.Request, handler: Callable):
    """Protect /api/* endpoints.

    Checks the optional bearer token and resolves tenant (X-Tenant-Id) and
    staff user (X-User-Id) into ``request["tenant_id"]`` / ``request["user_id"]``.
    """
    if request.path in PUBLIC_PATHS or not request.path.startswith("/api/"):
        return await handler(request)

    api_token = request.app.get("api_token")
    if api_token:
        auth = request.headers.get("Authorization", "")
        scheme, _, token = auth.partition(" ")
        if scheme.lower() != "bearer" or not hmac.compare_digest(token, api_token):
            logger.warning(f"API access with invalid token: {request.path}")
            return web.json_response({"error": "Invalid or missing API token"}, status=401)

    tenant_id = _int_header(request, "X-Tenant-Id")
    if tenant_id is None:
        raise TenantRequiredError()

    request["tenant_id"] = tenant_id
    request["user_id"] = _int_header(request, "X-User-Id")
    return await handler(request)
