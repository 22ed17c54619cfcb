"""REST API handlers."""
from aiohttp import web

from app.handlers import health, packages, sessions, transactions, waiting_list


def setup_routes(app: web.Application):
    """Setup all API routes."""
    health.setup_routes(app)
    packages.setup_routes(app)
    waiting_list.setup_routes(app)
    sessions.setup_routes(app)
    transactions.setup_routes(app)
