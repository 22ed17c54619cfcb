"""Client notifications through the Telegram bot."""
import logging
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from core.exceptions import NotificationError
from database.models import Client

logger = logging.getLogger(__name__)

TELEGRAM_METHOD = "telegram"


class TelegramNotifier:
    """Send HTML messages to clients that linked a Telegram chat."""

    method = TELEGRAM_METHOD

    def __init__(self, bot: Optional[Bot]):
        self.bot = bot

    async def send(self, client: Client, text: str) -> None:
        """
        Deliver a message to a client.

        Raises:
            NotificationError: Bot not configured, client has no chat, or Telegram refused
        """
        if self.bot is None:
            raise NotificationError("Telegram notifications are not configured")
        if not client.telegram_id:
            raise NotificationError(f"Client {client.id} has no Telegram chat linked")

        try:
            await self.bot.send_message(chat_id=client.telegram_id, text=text)
        except TelegramAPIError as e:
            logger.warning(f"Telegram refused message to client {client.id}: {e}")
            raise NotificationError(f"Telegram delivery failed: {e}") from e

        logger.info(f"Notification sent to client {client.id}", extra={"client_id": client.id})
