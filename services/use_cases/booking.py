"""
Session booking use cases.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta, timezone
from typing import Optional

from services.use_cases.base import BaseUseCase
from services.packages import PackageService
from services.waiting_list import WaitingListService
from database.repositories import RoomRepository, SessionRepository
from database.models import (
    ClientPackage,
    SessionStatus,
    TrainingSession,
    WaitingListEntry,
    WaitingListStatus,
)
from core.exceptions import (
    CoachNotEligibleError,
    NoUsablePackageError,
    SessionConflictError,
    SessionNotFoundError,
    SessionStatusError,
    ValidationError,
    WaitingListStatusError,
)
from core.dto.waiting_list import BookSessionDTO

logger = logging.getLogger(__name__)

BOOKABLE_STATUSES = (WaitingListStatus.APPROVED.value, WaitingListStatus.NOTIFIED.value)


@dataclass
class BookingResult:
    """Outcome of booking from the waiting list."""
    session: TrainingSession
    entry: WaitingListEntry
    client_package: Optional[ClientPackage] = None


class BookFromWaitingListUseCase(BaseUseCase[BookingResult]):
    """
    Turn a waiting list entry into a scheduled session.

    The session (and the package debit) is committed first, then the entry
    is marked booked in a second commit. A failure between the two leaves a
    booked session with an entry still approved or notified.
    """

    async def execute(self, entry_id: int, data: BookSessionDTO) -> BookingResult:
        """
        Book a session for the entry's client.

        Raises:
            WaitingListEntryNotFoundError: Unknown entry
            WaitingListStatusError: Entry is not approved or notified
            CoachNotEligibleError: Coach fails the entry's coach matching
            SessionConflictError: Coach or room busy in the range
            NoUsablePackageError: use_package set but the client has nothing to spend
        """
        waiting_list = WaitingListService(self.session, self.tenant_id, self.user_id)
        packages = PackageService(self.session, self.tenant_id, self.user_id)
        sessions = SessionRepository(self.session)

        entry = await waiting_list.get(entry_id)
        if entry.status not in BOOKABLE_STATUSES:
            raise WaitingListStatusError(entry.status, WaitingListStatus.BOOKED.value)

        candidates = await waiting_list.match_coaches(entry_id)
        if data.coach_id not in {c.id for c in candidates}:
            raise CoachNotEligibleError()

        if data.room_id is not None:
            room = await RoomRepository(self.session).get_by_id(self.tenant_id, data.room_id)
            if not room or room.studio_id != entry.studio_id or not room.is_active:
                raise ValidationError("room_id", "room not available in this studio")

        start_time = data.start_time
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        start_time = start_time.astimezone(timezone.utc)
        end_time = start_time + timedelta(minutes=data.duration_minutes)

        if await sessions.check_time_conflict(self.tenant_id, start_time, end_time, coach_id=data.coach_id):
            raise SessionConflictError("coach", start_time.isoformat())
        if data.room_id is not None and await sessions.check_time_conflict(
            self.tenant_id, start_time, end_time, room_id=data.room_id
        ):
            raise SessionConflictError("room", start_time.isoformat())

        client_package = None
        if data.use_package:
            best = await packages.find_best_package_for_session(entry.client_id)
            if not best:
                raise NoUsablePackageError()
            client_package = await packages.use_session(best.id)

        training = await sessions.add(TrainingSession(
            tenant_id=self.tenant_id,
            studio_id=entry.studio_id,
            client_id=entry.client_id,
            coach_id=data.coach_id,
            room_id=data.room_id,
            client_package_id=client_package.id if client_package else None,
            start_time=start_time,
            end_time=end_time,
            status=SessionStatus.SCHEDULED.value,
            notes=data.notes,
        ))
        await self.session.commit()
        logger.info(
            f"Session {training.id} booked for client {entry.client_id} from waiting list entry {entry.id}",
            extra={"tenant_id": self.tenant_id, "client_id": entry.client_id, "entity_id": training.id},
        )

        entry = await waiting_list.mark_as_booked(entry.id, training.id)
        await self.session.commit()

        return BookingResult(session=training, entry=entry, client_package=client_package)


class CancelSessionUseCase(BaseUseCase[TrainingSession]):
    """Cancel a scheduled session and credit its package back."""

    async def execute(self, session_id: int) -> TrainingSession:
        """
        Raises:
            SessionNotFoundError: Unknown session
            SessionStatusError: Session is not scheduled
        """
        sessions = SessionRepository(self.session)
        training = await sessions.get_by_id(self.tenant_id, session_id)
        if not training:
            raise SessionNotFoundError(session_id)

        if training.status != SessionStatus.SCHEDULED.value:
            raise SessionStatusError(training.status, SessionStatus.CANCELLED.value)

        training.status = SessionStatus.CANCELLED.value
        await sessions.flush()

        if training.client_package_id:
            packages = PackageService(self.session, self.tenant_id, self.user_id)
            await packages.return_session(training.client_package_id)

        await self.session.commit()

        logger.info(
            f"Session {training.id} cancelled",
            extra={"tenant_id": self.tenant_id, "entity_id": training.id},
        )
        return training
