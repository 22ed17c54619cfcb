"""aiohttp middlewares for the REST API."""
from app.middlewares.error_handler import error_middleware
from app.middlewares.logging import request_logging_middleware
from app.middlewares.auth import api_auth_middleware

__all__ = [
    "error_middleware",
    "request_logging_middleware",
    "api_auth_middleware",
]
