"""Audit log repository."""
from typing import List

from sqlalchemy import select

from database.models import AuditLog
from database.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for AuditLog model operations."""

    model_class = AuditLog

    async def get_for_entity(
        self,
        tenant_id: int,
        entity_type: str,
        entity_id: int,
    ) -> List[AuditLog]:
        """Get the history of one entity, oldest first."""
        result = await self.session.execute(
            select(AuditLog)
            .where(
                AuditLog.tenant_id == tenant_id,
                AuditLog.entity_type == entity_type,
                AuditLog.entity_id == entity_id,
            )
            .order_by(AuditLog.id)
        )
        return list(result.scalars().all())
