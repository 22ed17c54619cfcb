"""Audit trail of staff actions."""
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import AuditLog
from database.repositories import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Write audit rows in the caller's unit of work."""

    def __init__(self, session: AsyncSession, tenant_id: int, user_id: Optional[int] = None):
        self.repo = AuditLogRepository(session)
        self.tenant_id = tenant_id
        self.user_id = user_id

    async def log(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[int],
        details: Optional[dict[str, Any]] = None,
    ) -> AuditLog:
        """
        Record an action.

        The row is flushed with the business change it describes, so a failed
        audit write fails the whole request.
        """
        entry = await self.repo.add(AuditLog(
            tenant_id=self.tenant_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            performed_by=self.user_id,
            details=details,
        ))
        logger.debug(
            f"Audit {action} on {entity_type}#{entity_id}",
            extra={"tenant_id": self.tenant_id, "user_id": self.user_id, "entity_id": entity_id},
        )
        return entry
