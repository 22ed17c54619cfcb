"""Studio cash-flow ledger: append-only rows, running balance, payment confirmation."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from pytz import timezone as pytz_timezone
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from core.dto.transactions import CreateTransactionDTO
from core.exceptions import (
    ClientNotFoundError,
    TransactionAlreadyPaidError,
    TransactionNotFoundError,
    ValidationError,
)
from database.models import (
    Tenant,
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from database.repositories import (
    ClientPackageRepository,
    ClientRepository,
    StudioRepository,
    TransactionRepository,
)
from services.audit import AuditService

logger = logging.getLogger(__name__)

CLIENT_PACKAGE_REFERENCE = "client_package"


@dataclass
class LedgerRow:
    """Transaction with the balance after it."""
    transaction: Transaction
    running_balance: int


@dataclass
class LedgerSummary:
    """Totals over a period."""
    income: int
    expense: int
    refund: int
    net: int
    start: Optional[date] = None
    end: Optional[date] = None


def compute_running_balances(transactions: Iterable[Transaction]) -> List[LedgerRow]:
    """
    Walk the ledger in the given (chronological) order.

    Paid income adds, paid expense and refund subtract; pending rows carry the
    previous balance unchanged.
    """
    balance = 0
    rows = []
    for tx in transactions:
        if tx.is_paid:
            balance += tx.signed_amount
        rows.append(LedgerRow(transaction=tx, running_balance=balance))
    return rows


class TransactionLedgerService:
    """Ledger operations for one tenant."""

    def __init__(self, session: AsyncSession, tenant_id: int, user_id: Optional[int] = None):
        self.session = session
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.repo = TransactionRepository(session)
        self.audit = AuditService(session, tenant_id, user_id)

    async def create(self, data: CreateTransactionDTO) -> Transaction:
        """
        Append a ledger row; amounts are stored as positive magnitudes.

        Raises:
            ClientNotFoundError: client_id is not a client of this tenant
            ValidationError: studio_id is not a studio of this tenant
        """
        if data.client_id is not None:
            if not await ClientRepository(self.session).get_by_id(self.tenant_id, data.client_id):
                raise ClientNotFoundError(data.client_id)
        if data.studio_id is not None:
            if not await StudioRepository(self.session).get_by_id(self.tenant_id, data.studio_id):
                raise ValidationError("studio_id", "studio not found")

        status = TransactionStatus(data.status)
        tx = Transaction(
            tenant_id=self.tenant_id,
            studio_id=data.studio_id,
            client_id=data.client_id,
            type=TransactionType(data.type).value,
            category=TransactionCategory(data.category).value,
            status=status.value,
            amount=abs(data.amount),
            payment_method=data.payment_method,
            reference_type=data.reference_type,
            reference_id=data.reference_id,
            description=data.description,
            created_by=self.user_id,
            paid_at=datetime.now(timezone.utc) if status == TransactionStatus.PAID else None,
        )
        await self.repo.add(tx)
        logger.info(
            f"Transaction {tx.id} recorded: {tx.type}/{tx.category} {tx.amount} ({tx.status})",
            extra={"tenant_id": self.tenant_id, "entity_id": tx.id},
        )
        return tx

    async def get(self, transaction_id: int) -> Transaction:
        tx = await self.repo.get_by_id(self.tenant_id, transaction_id)
        if not tx:
            raise TransactionNotFoundError(transaction_id)
        return tx

    async def confirm_payment(self, transaction_id: int, payment_method: str) -> Transaction:
        """
        Move a pending transaction to paid.

        A confirmed package sale also marks the sold client package as paid.

        Raises:
            TransactionNotFoundError: Unknown transaction
            TransactionAlreadyPaidError: Already confirmed
        """
        tx = await self.get(transaction_id)
        if tx.is_paid:
            raise TransactionAlreadyPaidError()

        now = datetime.now(timezone.utc)
        tx.status = TransactionStatus.PAID.value
        tx.payment_method = payment_method
        tx.paid_at = now

        if tx.reference_type == CLIENT_PACKAGE_REFERENCE and tx.reference_id:
            cp = await ClientPackageRepository(self.session).get_by_id(self.tenant_id, tx.reference_id)
            if cp:
                cp.payment_method = payment_method
                cp.paid_at = now

        await self.repo.flush()
        await self.audit.log(
            "CONFIRM_PAYMENT",
            "Transaction",
            tx.id,
            {"payment_method": payment_method, "amount": tx.amount},
        )
        logger.info(
            f"Transaction {tx.id} confirmed via {payment_method}",
            extra={"tenant_id": self.tenant_id, "entity_id": tx.id},
        )
        return tx

    async def list(
        self,
        type_: Optional[TransactionType] = None,
        category: Optional[TransactionCategory] = None,
        client_id: Optional[int] = None,
    ) -> List[LedgerRow]:
        """
        List ledger rows newest first with their running balances.

        Balances always come from the full tenant ledger; filters only pick
        which rows are returned.
        """
        rows = compute_running_balances(await self.repo.get_chronological(self.tenant_id))
        if type_:
            rows = [r for r in rows if r.transaction.type == TransactionType(type_).value]
        if category:
            rows = [r for r in rows if r.transaction.category == TransactionCategory(category).value]
        if client_id:
            rows = [r for r in rows if r.transaction.client_id == client_id]
        rows.reverse()
        return rows

    async def current_balance(self) -> int:
        rows = compute_running_balances(await self.repo.get_chronological(self.tenant_id))
        return rows[-1].running_balance if rows else 0

    async def summary(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> LedgerSummary:
        """
        Income, expense and refund totals with net = income - expense - refund.

        Days are calendar days in the tenant's timezone.

        Args:
            start: First day included
            end: Last day included
        """
        if start and end and start > end:
            raise ValidationError("start", "must not be after end")

        tenant = await self.session.get(Tenant, self.tenant_id)
        tz = pytz_timezone(tenant.timezone if tenant else settings.timezone)

        def day_start(day: date) -> datetime:
            return tz.localize(datetime.combine(day, time.min)).astimezone(timezone.utc)

        start_dt = day_start(start) if start else None
        end_dt = day_start(end + timedelta(days=1)) if end else None
        totals = await self.repo.sum_by_type(self.tenant_id, start_dt, end_dt)

        income = totals[TransactionType.INCOME.value]
        expense = totals[TransactionType.EXPENSE.value]
        refund = totals[TransactionType.REFUND.value]
        return LedgerSummary(
            income=income,
            expense=expense,
            refund=refund,
            net=income - expense - refund,
            start=start,
            end=end,
        )
