"""Repositories for studios, rooms, clients and coaches."""
from typing import List

from sqlalchemy import select

from database.models import Client, Coach, Room, Studio
from database.repositories.base import BaseRepository


class StudioRepository(BaseRepository[Studio]):
    """Repository for Studio model operations."""

    model_class = Studio


class RoomRepository(BaseRepository[Room]):
    """Repository for Room model operations."""

    model_class = Room


class ClientRepository(BaseRepository[Client]):
    """Repository for Client model operations."""

    model_class = Client


class CoachRepository(BaseRepository[Coach]):
    """Repository for Coach model operations."""

    model_class = Coach

    async def get_active_by_studio(self, tenant_id: int, studio_id: int) -> List[Coach]:
        """Get active coaches of a studio ordered by name."""
        result = await self.session.execute(
            select(Coach)
            .where(
                Coach.tenant_id == tenant_id,
                Coach.studio_id == studio_id,
                Coach.is_active.is_(True),
            )
            .order_by(Coach.name)
        )
        return list(result.scalars().all())
