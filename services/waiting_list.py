"""Waiting list queue with its approval workflow."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.messages import NotificationMessages
from core.dto.waiting_list import CreateWaitingListEntryDTO, UpdateWaitingListEntryDTO
from core.exceptions import (
    ClientNotFoundError,
    CoachNotFoundError,
    NotificationError,
    SessionNotFoundError,
    ValidationError,
    WaitingListEntryNotFoundError,
    WaitingListStatusError,
)
from database.models import (
    Client,
    Coach,
    PreferredClientGender,
    WaitingListEntry,
    WaitingListStatus,
)
from database.repositories import (
    ClientRepository,
    CoachRepository,
    SessionRepository,
    StudioRepository,
    WaitingListRepository,
)
from services.notifications import TelegramNotifier

logger = logging.getLogger(__name__)


def coach_accepts_client(coach: Coach, client: Client) -> bool:
    """
    Gender preference filter.

    Coaches open to anyone always pass; a client who did not disclose a
    gender passes every coach.
    """
    if coach.preferred_client_gender == PreferredClientGender.ANY.value:
        return True
    if not client.has_gender:
        return True
    return coach.preferred_client_gender == client.gender


def default_priority() -> int:
    """Creation time in milliseconds; earlier requests are served first."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class WaitingListService:
    """Waiting list operations for one tenant."""

    def __init__(
        self,
        session: AsyncSession,
        tenant_id: int,
        user_id: Optional[int] = None,
        notifier: Optional[TelegramNotifier] = None,
    ):
        self.session = session
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.notifier = notifier
        self.repo = WaitingListRepository(session)
        self.clients = ClientRepository(session)
        self.coaches = CoachRepository(session)
        self.studios = StudioRepository(session)
        self.sessions = SessionRepository(session)

    async def _check_coach(self, coach_id: int, studio_id: int) -> Coach:
        coach = await self.coaches.get_by_id(self.tenant_id, coach_id)
        if not coach:
            raise CoachNotFoundError(coach_id)
        if coach.studio_id != studio_id:
            raise ValidationError("coach_id", "coach works at another studio")
        return coach

    def _transition(self, entry: WaitingListEntry, target: WaitingListStatus) -> None:
        if not entry.can_transition_to(target):
            raise WaitingListStatusError(entry.status, target.value)
        logger.info(
            f"Waiting list entry {entry.id}: {entry.status} -> {target.value}",
            extra={"tenant_id": self.tenant_id, "entity_id": entry.id},
        )
        entry.status = target.value

    async def create(self, data: CreateWaitingListEntryDTO) -> WaitingListEntry:
        """
        Queue a client.

        Entries needing approval start as pending, the rest as approved.
        """
        client = await self.clients.get_by_id(self.tenant_id, data.client_id)
        if not client:
            raise ClientNotFoundError(data.client_id)

        studio = await self.studios.get_by_id(self.tenant_id, data.studio_id)
        if not studio:
            raise ValidationError("studio_id", "studio not found")

        if data.coach_id is not None:
            await self._check_coach(data.coach_id, studio.id)

        status = WaitingListStatus.PENDING if data.requires_approval else WaitingListStatus.APPROVED
        entry = await self.repo.add(WaitingListEntry(
            tenant_id=self.tenant_id,
            client_id=client.id,
            studio_id=studio.id,
            coach_id=data.coach_id,
            preferred_date=data.preferred_date,
            preferred_time_slot=data.preferred_time_slot,
            status=status.value,
            requires_approval=data.requires_approval,
            priority=default_priority(),
            notes=data.notes,
        ))
        logger.info(
            f"Client {client.id} added to waiting list as entry {entry.id} ({entry.status})",
            extra={"tenant_id": self.tenant_id, "client_id": client.id, "entity_id": entry.id},
        )
        return entry

    async def list(
        self,
        status: Optional[WaitingListStatus] = None,
        studio_id: Optional[int] = None,
    ) -> List[WaitingListEntry]:
        return await self.repo.list_for_tenant(self.tenant_id, status, studio_id)

    async def get(self, entry_id: int) -> WaitingListEntry:
        entry = await self.repo.get_by_id(self.tenant_id, entry_id)
        if not entry:
            raise WaitingListEntryNotFoundError(entry_id)
        return entry

    async def list_for_client(self, client_id: int) -> List[WaitingListEntry]:
        return await self.repo.get_by_client(self.tenant_id, client_id)

    async def update(self, entry_id: int, data: UpdateWaitingListEntryDTO) -> WaitingListEntry:
        """Change preferences; the status only moves through workflow actions."""
        entry = await self.get(entry_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("coach_id") is not None:
            await self._check_coach(changes["coach_id"], entry.studio_id)

        for field, value in changes.items():
            setattr(entry, field, value)
        await self.repo.flush()
        return entry

    async def remove(self, entry_id: int) -> None:
        entry = await self.get(entry_id)
        await self.repo.delete(entry)
        logger.info(
            f"Waiting list entry {entry_id} removed",
            extra={"tenant_id": self.tenant_id, "entity_id": entry_id},
        )

    async def approve(self, entry_id: int, approver_id: Optional[int] = None) -> WaitingListEntry:
        """Pending -> approved, stamping who approved it."""
        entry = await self.get(entry_id)
        if entry.status != WaitingListStatus.PENDING.value:
            raise WaitingListStatusError(entry.status, WaitingListStatus.APPROVED.value)

        self._transition(entry, WaitingListStatus.APPROVED)
        entry.approved_by = approver_id if approver_id is not None else self.user_id
        entry.approved_at = datetime.now(timezone.utc)
        await self.repo.flush()
        return entry

    async def reject(self, entry_id: int) -> WaitingListEntry:
        """Pending or approved -> cancelled; an already cancelled entry is left as is."""
        entry = await self.get(entry_id)
        if entry.status == WaitingListStatus.CANCELLED.value:
            return entry

        self._transition(entry, WaitingListStatus.CANCELLED)
        await self.repo.flush()
        return entry

    async def notify(self, entry_id: int) -> WaitingListEntry:
        """
        Tell the client a slot is available: approved -> notified.

        Raises:
            WaitingListStatusError: Entry is not approved
            NotificationError: Message could not be delivered; entry unchanged
        """
        entry = await self.get(entry_id)
        if not entry.can_transition_to(WaitingListStatus.NOTIFIED):
            raise WaitingListStatusError(entry.status, WaitingListStatus.NOTIFIED.value)

        if self.notifier is None:
            raise NotificationError("Telegram notifications are not configured")

        client = await self.clients.get_by_id(self.tenant_id, entry.client_id)
        if not client:
            raise ClientNotFoundError(entry.client_id)
        studio = await self.studios.get_by_id(self.tenant_id, entry.studio_id)

        await self.notifier.send(
            client,
            NotificationMessages.slot_available(
                client_name=client.name,
                studio_name=studio.name if studio else "the studio",
                preferred_date=entry.preferred_date,
                preferred_time_slot=entry.preferred_time_slot,
            ),
        )

        self._transition(entry, WaitingListStatus.NOTIFIED)
        entry.notified_at = datetime.now(timezone.utc)
        entry.notification_method = self.notifier.method
        await self.repo.flush()
        return entry

    async def mark_as_booked(self, entry_id: int, session_id: Optional[int] = None) -> WaitingListEntry:
        """
        Approved or notified -> booked, after the session was created.

        Raises:
            SessionNotFoundError: Session unknown to this tenant or booked for another client
        """
        entry = await self.get(entry_id)
        if session_id is not None:
            training = await self.sessions.get_by_id(self.tenant_id, session_id)
            if not training or training.client_id != entry.client_id:
                raise SessionNotFoundError(session_id)
        self._transition(entry, WaitingListStatus.BOOKED)
        if session_id is not None:
            entry.session_id = session_id
        await self.repo.flush()
        return entry

    async def update_priority(self, entry_id: int, priority: int) -> WaitingListEntry:
        """Set a new rank; other entries keep theirs."""
        entry = await self.get(entry_id)
        entry.priority = priority
        await self.repo.flush()
        return entry

    async def match_coaches(self, entry_id: int) -> List[Coach]:
        """Active coaches of the entry's studio that accept this client."""
        entry = await self.get(entry_id)
        client = await self.clients.get_by_id(self.tenant_id, entry.client_id)
        if not client:
            raise ClientNotFoundError(entry.client_id)

        coaches = await self.coaches.get_active_by_studio(self.tenant_id, entry.studio_id)
        return [coach for coach in coaches if coach_accepts_client(coach, client)]
