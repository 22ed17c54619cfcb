"""Tests for the waiting list workflow."""
import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

from aiogram.exceptions import TelegramAPIError

from core.dto.waiting_list import CreateWaitingListEntryDTO, UpdateWaitingListEntryDTO
from core.exceptions import (
    ClientNotFoundError,
    NotificationError,
    SessionNotFoundError,
    WaitingListEntryNotFoundError,
    WaitingListStatusError,
)
from database.models import (
    Client,
    Coach,
    SessionStatus,
    TrainingSession,
    WaitingListStatus,
)
from services.notifications import TelegramNotifier
from services.waiting_list import WaitingListService, coach_accepts_client


@pytest.fixture
def mock_bot():
    return AsyncMock()


@pytest.fixture
def service(db_session, tenant, mock_bot):
    return WaitingListService(db_session, tenant.id, user_id=3, notifier=TelegramNotifier(mock_bot))


async def _create(service, client, studio, **kwargs):
    return await service.create(CreateWaitingListEntryDTO(
        client_id=client.id,
        studio_id=studio.id,
        **kwargs,
    ))


@pytest.mark.asyncio
async def test_create_requires_approval_starts_pending(service, client, studio):
    entry = await _create(service, client, studio, requires_approval=True)

    assert entry.status == WaitingListStatus.PENDING.value
    assert entry.priority > 0


@pytest.mark.asyncio
async def test_create_without_approval_starts_approved(service, client, studio):
    entry = await _create(service, client, studio, preferred_date=date(2026, 11, 2))

    assert entry.status == WaitingListStatus.APPROVED.value
    assert entry.preferred_date == date(2026, 11, 2)


@pytest.mark.asyncio
async def test_create_for_unknown_client(service, studio):
    with pytest.raises(ClientNotFoundError):
        await service.create(CreateWaitingListEntryDTO(client_id=404, studio_id=studio.id))


@pytest.mark.asyncio
async def test_full_flow_to_booked(service, mock_bot, client, studio):
    entry = await _create(service, client, studio, requires_approval=True)

    entry = await service.approve(entry.id)
    assert entry.status == WaitingListStatus.APPROVED.value
    assert entry.approved_by == 3
    assert entry.approved_at is not None

    entry = await service.notify(entry.id)
    assert entry.status == WaitingListStatus.NOTIFIED.value
    assert entry.notification_method == "telegram"
    assert entry.notified_at is not None
    assert mock_bot.send_message.call_args.kwargs["chat_id"] == client.telegram_id
    assert studio.name in mock_bot.send_message.call_args.kwargs["text"]

    entry = await service.mark_as_booked(entry.id, session_id=None)
    assert entry.status == WaitingListStatus.BOOKED.value

    with pytest.raises(WaitingListStatusError):
        await service.reject(entry.id)


@pytest.mark.asyncio
async def test_mark_as_booked_from_pending_fails(service, client, studio):
    entry = await _create(service, client, studio, requires_approval=True)

    with pytest.raises(WaitingListStatusError) as exc_info:
        await service.mark_as_booked(entry.id)
    assert exc_info.value.current_status == "pending"
    assert entry.status == WaitingListStatus.PENDING.value


@pytest.mark.asyncio
async def test_approved_entry_can_be_booked_directly(service, client, studio):
    entry = await _create(service, client, studio)
    entry = await service.mark_as_booked(entry.id)
    assert entry.status == WaitingListStatus.BOOKED.value


@pytest.mark.asyncio
async def test_mark_as_booked_with_unknown_session(service, client, studio):
    entry = await _create(service, client, studio)

    with pytest.raises(SessionNotFoundError):
        await service.mark_as_booked(entry.id, session_id=424242)
    assert entry.status == WaitingListStatus.APPROVED.value
    assert entry.session_id is None


@pytest.mark.asyncio
async def test_mark_as_booked_with_session_of_another_client(
    service, db_session, tenant, client, studio, coach
):
    someone_else = Client(tenant_id=tenant.id, name="Paul Meyer")
    db_session.add(someone_else)
    await db_session.flush()
    start = datetime(2026, 11, 3, 10, 0, tzinfo=timezone.utc)
    training = TrainingSession(
        tenant_id=tenant.id,
        studio_id=studio.id,
        client_id=someone_else.id,
        coach_id=coach.id,
        start_time=start,
        end_time=start + timedelta(minutes=20),
        status=SessionStatus.SCHEDULED.value,
    )
    db_session.add(training)
    await db_session.commit()
    entry = await _create(service, client, studio)

    with pytest.raises(SessionNotFoundError):
        await service.mark_as_booked(entry.id, session_id=training.id)
    assert entry.status == WaitingListStatus.APPROVED.value


@pytest.mark.asyncio
async def test_reject_is_noop_on_cancelled(service, client, studio):
    entry = await _create(service, client, studio, requires_approval=True)

    entry = await service.reject(entry.id)
    assert entry.status == WaitingListStatus.CANCELLED.value

    entry = await service.reject(entry.id)
    assert entry.status == WaitingListStatus.CANCELLED.value


@pytest.mark.asyncio
async def test_reject_notified_entry_fails(service, client, studio):
    entry = await _create(service, client, studio)
    await service.notify(entry.id)

    with pytest.raises(WaitingListStatusError):
        await service.reject(entry.id)


@pytest.mark.asyncio
async def test_approve_only_from_pending(service, client, studio):
    entry = await _create(service, client, studio)
    with pytest.raises(WaitingListStatusError):
        await service.approve(entry.id)


@pytest.mark.asyncio
async def test_notify_pending_entry_fails(service, mock_bot, client, studio):
    entry = await _create(service, client, studio, requires_approval=True)

    with pytest.raises(WaitingListStatusError):
        await service.notify(entry.id)
    mock_bot.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_notify_without_telegram_leaves_entry_unchanged(
    service, db_session, tenant, studio, mock_bot
):
    walk_in = Client(tenant_id=tenant.id, name="Walk-in", phone="+440000000001")
    db_session.add(walk_in)
    await db_session.commit()
    entry = await _create(service, walk_in, studio)

    with pytest.raises(NotificationError):
        await service.notify(entry.id)

    assert entry.status == WaitingListStatus.APPROVED.value
    assert entry.notified_at is None
    mock_bot.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_notify_telegram_failure(service, mock_bot, client, studio):
    mock_bot.send_message.side_effect = TelegramAPIError(method=None, message="chat not found")
    entry = await _create(service, client, studio)

    with pytest.raises(NotificationError):
        await service.notify(entry.id)
    assert entry.status == WaitingListStatus.APPROVED.value


@pytest.mark.asyncio
async def test_list_ordered_by_priority(service, client, studio):
    first = await _create(service, client, studio)
    second = await _create(service, client, studio)
    third = await _create(service, client, studio, requires_approval=True)

    await service.update_priority(third.id, 1)

    entries = await service.list()
    assert [e.id for e in entries] == [third.id, first.id, second.id]

    approved = await service.list(status=WaitingListStatus.APPROVED)
    assert [e.id for e in approved] == [first.id, second.id]

    assert [e.id for e in await service.list_for_client(client.id)] == [third.id, first.id, second.id]


@pytest.mark.asyncio
async def test_update_preferences_and_remove(service, client, studio, coach):
    entry = await _create(service, client, studio)

    entry = await service.update(entry.id, UpdateWaitingListEntryDTO(
        preferred_time_slot="evening",
        coach_id=coach.id,
    ))
    assert entry.preferred_time_slot == "evening"
    assert entry.coach_id == coach.id
    assert entry.status == WaitingListStatus.APPROVED.value

    await service.remove(entry.id)
    with pytest.raises(WaitingListEntryNotFoundError):
        await service.get(entry.id)


@pytest.mark.asyncio
async def test_entry_of_other_tenant_not_found(db_session, other_tenant, service, client, studio):
    entry = await _create(service, client, studio)
    foreign = WaitingListService(db_session, other_tenant.id)

    with pytest.raises(WaitingListEntryNotFoundError):
        await foreign.approve(entry.id)


# ============== Coach matching ==============

def _coach(preference):
    return Coach(name="Coach", preferred_client_gender=preference, is_active=True)


def _client(gender):
    return Client(name="Client", gender=gender)


@pytest.mark.parametrize("preference,gender,expected", [
    ("any", "male", True),
    ("female", "female", True),
    ("female", "male", False),
    ("male", "female", False),
    ("male", None, True),
    ("female", "prefer_not_to_say", True),
    ("male", "other", False),
])
def test_coach_accepts_client(preference, gender, expected):
    assert coach_accepts_client(_coach(preference), _client(gender)) is expected


@pytest.mark.asyncio
async def test_match_coaches(service, db_session, tenant, studio, client, coach):
    women_only = Coach(
        tenant_id=tenant.id, studio_id=studio.id, name="Lena",
        preferred_client_gender="female", is_active=True,
    )
    men_only = Coach(
        tenant_id=tenant.id, studio_id=studio.id, name="Tom",
        preferred_client_gender="male", is_active=True,
    )
    inactive = Coach(
        tenant_id=tenant.id, studio_id=studio.id, name="Ben",
        preferred_client_gender="any", is_active=False,
    )
    db_session.add_all([women_only, men_only, inactive])
    await db_session.commit()
    entry = await _create(service, client, studio)

    matched = await service.match_coaches(entry.id)

    assert {c.id for c in matched} == {coach.id, women_only.id}
