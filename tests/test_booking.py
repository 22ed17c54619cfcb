"""Tests for booking sessions from the waiting list and cancelling them."""
import pytest
from datetime import datetime, timedelta, timezone

from core.dto.packages import AssignPackageDTO
from core.dto.waiting_list import BookSessionDTO, CreateWaitingListEntryDTO
from core.exceptions import (
    CoachNotEligibleError,
    NoUsablePackageError,
    SessionConflictError,
    SessionNotFoundError,
    SessionStatusError,
    WaitingListStatusError,
)
from database.models import Coach, SessionStatus, WaitingListStatus
from services.packages import PackageService
from services.use_cases import BookFromWaitingListUseCase, CancelSessionUseCase
from services.waiting_list import WaitingListService

START = datetime(2026, 11, 2, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def waiting_list(db_session, tenant):
    return WaitingListService(db_session, tenant.id)


@pytest.fixture
def packages(db_session, tenant):
    return PackageService(db_session, tenant.id)


@pytest.fixture
def book(db_session, tenant):
    return BookFromWaitingListUseCase(db_session, tenant.id, user_id=1)


async def _entry(waiting_list, client, studio, **kwargs):
    return await waiting_list.create(CreateWaitingListEntryDTO(
        client_id=client.id, studio_id=studio.id, **kwargs,
    ))


@pytest.mark.asyncio
async def test_book_from_waiting_list_debits_package(
    book, waiting_list, packages, client, studio, coach, room, package
):
    cp = await packages.assign(AssignPackageDTO(
        client_id=client.id, package_id=package.id, payment_method="cash",
    ))
    entry = await _entry(waiting_list, client, studio)

    result = await book.execute(entry.id, BookSessionDTO(
        coach_id=coach.id, room_id=room.id, start_time=START, duration_minutes=20,
    ))

    assert result.session.status == SessionStatus.SCHEDULED.value
    assert result.session.client_package_id == cp.id
    assert result.entry.status == WaitingListStatus.BOOKED.value
    assert result.entry.session_id == result.session.id
    assert result.client_package.sessions_remaining == 9


@pytest.mark.asyncio
async def test_book_without_package(book, waiting_list, client, studio, coach):
    entry = await _entry(waiting_list, client, studio)

    result = await book.execute(entry.id, BookSessionDTO(
        coach_id=coach.id, start_time=START, use_package=False,
    ))

    assert result.session.client_package_id is None
    assert result.client_package is None


@pytest.mark.asyncio
async def test_book_requires_usable_package(book, waiting_list, client, studio, coach):
    entry = await _entry(waiting_list, client, studio)

    with pytest.raises(NoUsablePackageError):
        await book.execute(entry.id, BookSessionDTO(coach_id=coach.id, start_time=START))
    assert entry.status == WaitingListStatus.APPROVED.value


@pytest.mark.asyncio
async def test_book_pending_entry_fails(book, waiting_list, client, studio, coach):
    entry = await _entry(waiting_list, client, studio, requires_approval=True)

    with pytest.raises(WaitingListStatusError):
        await book.execute(entry.id, BookSessionDTO(
            coach_id=coach.id, start_time=START, use_package=False,
        ))


@pytest.mark.asyncio
async def test_book_with_ineligible_coach(book, waiting_list, db_session, tenant, client, studio):
    men_only = Coach(
        tenant_id=tenant.id, studio_id=studio.id, name="Tom",
        preferred_client_gender="male", is_active=True,
    )
    db_session.add(men_only)
    await db_session.commit()
    entry = await _entry(waiting_list, client, studio)

    with pytest.raises(CoachNotEligibleError):
        await book.execute(entry.id, BookSessionDTO(
            coach_id=men_only.id, start_time=START, use_package=False,
        ))


@pytest.mark.asyncio
async def test_book_conflicting_coach_time(book, waiting_list, client, studio, coach):
    first = await _entry(waiting_list, client, studio)
    second = await _entry(waiting_list, client, studio)
    await book.execute(first.id, BookSessionDTO(
        coach_id=coach.id, start_time=START, duration_minutes=30, use_package=False,
    ))

    with pytest.raises(SessionConflictError):
        await book.execute(second.id, BookSessionDTO(
            coach_id=coach.id,
            start_time=START + timedelta(minutes=15),
            use_package=False,
        ))

    # Back-to-back is fine
    result = await book.execute(second.id, BookSessionDTO(
        coach_id=coach.id,
        start_time=START + timedelta(minutes=30),
        use_package=False,
    ))
    assert result.entry.status == WaitingListStatus.BOOKED.value


@pytest.mark.asyncio
async def test_cancel_session_credits_package(
    db_session, tenant, book, waiting_list, packages, client, studio, coach, package
):
    cp = await packages.assign(AssignPackageDTO(
        client_id=client.id, package_id=package.id, payment_method="cash",
    ))
    entry = await _entry(waiting_list, client, studio)
    result = await book.execute(entry.id, BookSessionDTO(coach_id=coach.id, start_time=START))
    assert cp.sessions_remaining == 9

    cancel = CancelSessionUseCase(db_session, tenant.id)
    session = await cancel.execute(result.session.id)

    assert session.status == SessionStatus.CANCELLED.value
    assert cp.sessions_remaining == 10
    assert cp.sessions_used == 0

    with pytest.raises(SessionStatusError):
        await cancel.execute(result.session.id)


@pytest.mark.asyncio
async def test_cancel_unknown_session(db_session, tenant):
    with pytest.raises(SessionNotFoundError):
        await CancelSessionUseCase(db_session, tenant.id).execute(31337)
