"""Client-facing Telegram notification texts."""
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class NotificationMessages:
    """Messages sent to clients through the Telegram bot."""

    @staticmethod
    def slot_available(
        client_name: str,
        studio_name: str,
        preferred_date: Optional[date] = None,
        preferred_time_slot: Optional[str] = None,
    ) -> str:
        """Waiting list entry reached the front of the queue."""
        text = (
            f"🎉 <b>A slot is available!</b>\n\n"
            f"Hi {client_name}, a session opened up at <b>{studio_name}</b>"
        )
        if preferred_date:
            text += f" on {preferred_date.strftime('%d.%m.%Y')}"
        if preferred_time_slot:
            text += f" ({preferred_time_slot})"
        text += ".\n\nReply to this message or call the studio to confirm your booking."
        return text

    @staticmethod
    def package_expiring(package_name: str, expiry_date: date, days_left: int) -> str:
        """Package runs out by date soon."""
        when = "today" if days_left == 0 else (
            "tomorrow" if days_left == 1 else f"in {days_left} days"
        )
        return (
            f"⚠️ <b>Your package expires {when}</b>\n\n"
            f"«{package_name}» is valid until {expiry_date.strftime('%d.%m.%Y')}.\n"
            f"Book your remaining sessions or ask the studio about a renewal."
        )

    @staticmethod
    def package_low_balance(package_name: str, sessions_remaining: int) -> str:
        """Package is almost used up."""
        if sessions_remaining == 0:
            left = "no sessions"
        elif sessions_remaining == 1:
            left = "1 session"
        else:
            left = f"{sessions_remaining} sessions"
        return (
            f"🔋 <b>Your package is running low</b>\n\n"
            f"You have {left} left in «{package_name}».\n"
            f"Ask the studio to renew it so you don't miss a workout."
        )
