"""Tests for the daily package monitor."""
import pytest
from datetime import date, timedelta
from unittest.mock import AsyncMock

from sqlalchemy import select

from core.dto.packages import AdjustSessionsDTO, AssignPackageDTO
from database.models import Client, ClientPackage, ClientPackageStatus
from services.notifications import TelegramNotifier
from services.package_monitor import PackageMonitorService
from services.packages import PackageService


@pytest.fixture
def mock_bot():
    return AsyncMock()


@pytest.fixture
def monitor(mock_bot, session_maker):
    return PackageMonitorService(
        TelegramNotifier(mock_bot),
        session_maker=session_maker,
        expiry_alert_days=3,
        low_balance_threshold=1,
    )


async def _assign(db_session, tenant, client, package, purchase_date):
    service = PackageService(db_session, tenant.id)
    cp = await service.assign(AssignPackageDTO(
        client_id=client.id,
        package_id=package.id,
        payment_method="cash",
        purchase_date=purchase_date,
    ))
    await db_session.commit()
    return cp


@pytest.mark.asyncio
async def test_overdue_packages_are_expired(monitor, db_session, tenant, client, package):
    cp = await _assign(db_session, tenant, client, package, date.today() - timedelta(days=45))
    cp_id = cp.id

    report = await monitor.check_packages()

    assert report.expired == 1
    db_session.expire_all()
    stored = (await db_session.execute(
        select(ClientPackage).where(ClientPackage.id == cp_id)
    )).scalar_one()
    assert stored.status == ClientPackageStatus.EXPIRED.value


@pytest.mark.asyncio
async def test_expiring_package_reminder(monitor, mock_bot, db_session, tenant, client, package):
    await _assign(db_session, tenant, client, package, date.today() - timedelta(days=28))

    report = await monitor.check_packages()

    assert report.reminded == 1
    assert mock_bot.send_message.called
    call_args = mock_bot.send_message.call_args
    assert call_args.kwargs['chat_id'] == client.telegram_id
    assert 'in 2 days' in call_args.kwargs['text']


@pytest.mark.asyncio
async def test_low_balance_reminder(monitor, mock_bot, db_session, tenant, client, package):
    cp = await _assign(db_session, tenant, client, package, date.today())
    await PackageService(db_session, tenant.id).adjust_sessions(
        cp.id, AdjustSessionsDTO(adjustment=-9, reason="Imported")
    )
    await db_session.commit()

    report = await monitor.check_packages()

    assert report.reminded == 1
    assert '1 session' in mock_bot.send_message.call_args.kwargs['text']


@pytest.mark.asyncio
async def test_fresh_package_no_reminder(monitor, mock_bot, db_session, tenant, client, package):
    await _assign(db_session, tenant, client, package, date.today())

    report = await monitor.check_packages()

    assert report.reminded == 0
    mock_bot.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_unreachable_client_is_skipped(monitor, mock_bot, db_session, tenant, package):
    walk_in = Client(tenant_id=tenant.id, name="Walk-in")
    db_session.add(walk_in)
    await db_session.commit()
    await _assign(db_session, tenant, walk_in, package, date.today() - timedelta(days=29))

    report = await monitor.check_packages()

    assert report.failed == 1
    assert report.reminded == 0
    mock_bot.send_message.assert_not_called()
