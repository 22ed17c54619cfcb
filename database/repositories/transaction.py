"""Transaction repository for the cash-flow ledger."""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, func

from database.models import Transaction, TransactionType
from database.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model operations."""

    model_class = Transaction

    async def get_chronological(self, tenant_id: int) -> List[Transaction]:
        """Get the whole ledger of a tenant, oldest first."""
        result = await self.session.execute(
            select(Transaction)
            .where(Transaction.tenant_id == tenant_id)
            .order_by(Transaction.created_at, Transaction.id)
        )
        return list(result.scalars().all())

    async def sum_by_type(
        self,
        tenant_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, int]:
        """
        Sum amounts per transaction type.

        Args:
            tenant_id: Owning tenant
            start: Inclusive lower bound on created_at
            end: Exclusive upper bound on created_at

        Returns:
            Mapping of type value to total; missing types are 0
        """
        query = (
            select(Transaction.type, func.coalesce(func.sum(Transaction.amount), 0))
            .where(Transaction.tenant_id == tenant_id)
            .group_by(Transaction.type)
        )
        if start:
            query = query.where(Transaction.created_at >= start)
        if end:
            query = query.where(Transaction.created_at < end)

        result = await self.session.execute(query)
        totals = {t.value: 0 for t in TransactionType}
        for type_, total in result.all():
            totals[type_] = int(total)
        return totals
