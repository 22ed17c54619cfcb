"""Health check endpoint."""
import logging
from datetime import datetime, timezone

from aiohttp import web
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.handlers.helpers import session_maker

logger = logging.getLogger(__name__)


def setup_routes(app: web.Application):
    app.router.add_get('/health', health_check)


async def health_check(request: web.Request):
    """Report service and database status."""
    database = "ok"
    try:
        async with session_maker(request)() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Health check: database unavailable: {e}")
        database = "unavailable"
    return web.json_response(
        {
            "status": "ok" if database == "ok" else "degraded",
            "database": database,
            "time": datetime.now(timezone.utc).isoformat(),
        },
        status=200 if database == "ok" else 503,
    )
