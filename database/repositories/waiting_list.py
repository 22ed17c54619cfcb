"""Waiting list repository."""
from typing import List, Optional

from sqlalchemy import select

from database.models import WaitingListEntry, WaitingListStatus
from database.repositories.base import BaseRepository


class WaitingListRepository(BaseRepository[WaitingListEntry]):
    """Repository for WaitingListEntry model operations."""

    model_class = WaitingListEntry

    async def list_for_tenant(
        self,
        tenant_id: int,
        status: Optional[WaitingListStatus] = None,
        studio_id: Optional[int] = None,
    ) -> List[WaitingListEntry]:
        """Get entries ordered by priority, lowest number first."""
        query = select(WaitingListEntry).where(WaitingListEntry.tenant_id == tenant_id)

        if status:
            query = query.where(WaitingListEntry.status == status.value)

        if studio_id:
            query = query.where(WaitingListEntry.studio_id == studio_id)

        query = query.order_by(WaitingListEntry.priority, WaitingListEntry.id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_client(self, tenant_id: int, client_id: int) -> List[WaitingListEntry]:
        """Get entries of a client ordered by priority."""
        result = await self.session.execute(
            select(WaitingListEntry)
            .where(
                WaitingListEntry.tenant_id == tenant_id,
                WaitingListEntry.client_id == client_id,
            )
            .order_by(WaitingListEntry.priority, WaitingListEntry.id)
        )
        return list(result.scalars().all())
