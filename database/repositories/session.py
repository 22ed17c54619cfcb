"""Training session repository."""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, and_

from database.models import SessionStatus, TrainingSession
from database.repositories.base import BaseRepository


class SessionRepository(BaseRepository[TrainingSession]):
    """Repository for TrainingSession model operations."""

    model_class = TrainingSession

    async def check_time_conflict(
        self,
        tenant_id: int,
        start_time: datetime,
        end_time: datetime,
        coach_id: Optional[int] = None,
        room_id: Optional[int] = None,
    ) -> bool:
        """Check if a scheduled session of the coach or room overlaps the range."""
        query = select(TrainingSession.id).where(
            and_(
                TrainingSession.tenant_id == tenant_id,
                TrainingSession.status == SessionStatus.SCHEDULED.value,
                TrainingSession.start_time < end_time,
                TrainingSession.end_time > start_time,
            )
        )
        if coach_id is not None:
            query = query.where(TrainingSession.coach_id == coach_id)
        if room_id is not None:
            query = query.where(TrainingSession.room_id == room_id)

        result = await self.session.execute(query.limit(1))
        return result.first() is not None
