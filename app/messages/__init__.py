"""
Messages package for centralized text management.

- notifications.py: Telegram messages sent to clients
"""

from app.messages.notifications import NotificationMessages

__all__ = [
    'NotificationMessages',
]
