"""Application entry point: REST API and the daily package monitor."""
import asyncio
import logging
from typing import Optional

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import timezone as pytz_timezone

from app.config import settings
from app.handlers import setup_routes
from app.logging_config import setup_logging
from app.middlewares import (
    api_auth_middleware,
    error_middleware,
    request_logging_middleware,
)
from database import async_session_maker, close_db, init_db
from services.notifications import TelegramNotifier
from services.package_monitor import PackageMonitorService

logger = logging.getLogger(__name__)


def build_app(
    session_maker=None,
    notifier: Optional[TelegramNotifier] = None,
    api_token: Optional[str] = None,
) -> web.Application:
    """
    Create the aiohttp application.

    Args:
        session_maker: Session factory; defaults to the configured database
        notifier: Telegram notifier for waiting list notifications
        api_token: Shared bearer token; defaults to settings.api_token
    """
    app = web.Application(middlewares=[
        request_logging_middleware,
        error_middleware,
        api_auth_middleware,
    ])
    app["session_maker"] = session_maker or async_session_maker
    app["notifier"] = notifier
    app["api_token"] = api_token if api_token is not None else settings.api_token
    setup_routes(app)
    return app


def create_bot() -> Optional[Bot]:
    """Telegram bot for client notifications, if a token is configured."""
    if not settings.bot_token:
        logger.warning("BOT_TOKEN not set, client notifications are disabled")
        return None
    return Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def start_package_monitor(monitor: PackageMonitorService) -> AsyncIOScheduler:
    """Run the package check daily at the configured hour."""
    scheduler = AsyncIOScheduler(timezone=pytz_timezone(settings.timezone))
    scheduler.add_job(
        monitor.check_packages,
        'cron',
        hour=settings.package_monitor_hour,
        minute=0,
        id='package_monitor',
        replace_existing=True
    )
    scheduler.start()
    logger.info(f"Package monitor scheduled (daily at {settings.package_monitor_hour}:00)")
    return scheduler


async def main():
    setup_logging()
    await init_db()

    bot = create_bot()
    notifier = TelegramNotifier(bot)
    app = build_app(notifier=notifier)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.host, settings.port)
    await site.start()
    logger.info(f"API listening on {settings.host}:{settings.port}")

    scheduler = start_package_monitor(PackageMonitorService(notifier))
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        await runner.cleanup()
        if bot:
            await bot.session.close()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
