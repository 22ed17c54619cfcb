"""Daily package monitoring: persist expiry and remind clients."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.messages import NotificationMessages
from core.exceptions import NotificationError
from database.base import async_session_maker
from database.models import ClientPackage, ClientPackageStatus
from database.repositories import ClientPackageRepository, ClientRepository, PackageRepository
from services.notifications import TelegramNotifier

logger = logging.getLogger(__name__)


@dataclass
class MonitorReport:
    """What one monitor run did."""
    expired: int = 0
    reminded: int = 0
    failed: int = 0


class PackageMonitorService:
    """Service for sweeping overdue packages and sending reminders."""

    def __init__(
        self,
        notifier: TelegramNotifier,
        session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
        expiry_alert_days: Optional[int] = None,
        low_balance_threshold: Optional[int] = None,
    ):
        self.notifier = notifier
        self.session_maker = session_maker
        self.expiry_alert_days = (
            settings.package_expiry_alert_days if expiry_alert_days is None else expiry_alert_days
        )
        self.low_balance_threshold = (
            settings.package_low_balance_threshold
            if low_balance_threshold is None else low_balance_threshold
        )

    async def check_packages(self, today: Optional[date] = None) -> MonitorReport:
        """Expire overdue packages, then remind clients about expiring or low packages."""
        today = today or date.today()
        report = MonitorReport()
        logger.info("Checking client packages...")

        async with self.session_maker() as session:
            repo = ClientPackageRepository(session)

            for cp in await repo.get_overdue(today):
                cp.status = ClientPackageStatus.EXPIRED.value
                report.expired += 1
                logger.info(
                    f"Client package {cp.id} expired on {cp.expiry_date}",
                    extra={"tenant_id": cp.tenant_id, "entity_id": cp.id},
                )
            await session.commit()

            expiring = await repo.get_expiring(
                today,
                self.expiry_alert_days,
                self.low_balance_threshold,
            )
            for cp in expiring:
                if await self._send_reminder(session, cp, today):
                    report.reminded += 1
                else:
                    report.failed += 1

        logger.info(
            f"Checked client packages: {report.expired} expired, "
            f"{report.reminded} reminded, {report.failed} not reachable"
        )
        return report

    async def _send_reminder(self, session: AsyncSession, cp: ClientPackage, today: date) -> bool:
        """Send one reminder; delivery problems are logged and skipped."""
        client = await ClientRepository(session).get_by_id(cp.tenant_id, cp.client_id)
        package = await PackageRepository(session).get_by_id(cp.tenant_id, cp.package_id)
        if not client or not package:
            return False

        if cp.sessions_remaining <= self.low_balance_threshold:
            text = NotificationMessages.package_low_balance(package.name, cp.sessions_remaining)
        else:
            text = NotificationMessages.package_expiring(
                package.name,
                cp.expiry_date,
                (cp.expiry_date - today).days,
            )

        try:
            await self.notifier.send(client, text)
        except NotificationError as e:
            logger.warning(
                f"Package reminder for client package {cp.id} not sent: {e.message}",
                extra={"tenant_id": cp.tenant_id, "client_id": client.id},
            )
            return False
        return True
