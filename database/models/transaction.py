"""Transaction model - one row of the studio cash-flow ledger."""
from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class TransactionType(str, Enum):
    """Direction of a money movement."""

    INCOME = "income"
    EXPENSE = "expense"
    REFUND = "refund"


class TransactionCategory(str, Enum):
    """What the money was for."""

    PACKAGE_SALE = "package_sale"
    SESSION_FEE = "session_fee"
    REFUND = "refund"
    OTHER = "other"


class TransactionStatus(str, Enum):
    """Transaction status."""

    PENDING = "pending"  # Awaiting payment confirmation
    PAID = "paid"  # Money received / spent


class Transaction(Base):
    """Append-only ledger row; running balance is computed when reading."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    studio_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("studios.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    client_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Type: income, expense, refund"
    )
    category: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        comment="Category: package_sale, session_fee, refund, other"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TransactionStatus.PAID.value,
        index=True,
        comment="Status: pending, paid"
    )

    amount: Mapped[int] = mapped_column(Integer, nullable=False, comment="Amount in currency units")
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # What this row pays for, e.g. ("client_package", 42)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, type='{self.type}', "
            f"amount={self.amount}, status='{self.status}')>"
        )

    @property
    def is_paid(self) -> bool:
        """Check if transaction affects the cash balance."""
        return self.status == TransactionStatus.PAID.value

    @property
    def signed_amount(self) -> int:
        """Amount with the sign it contributes to the balance."""
        if self.type == TransactionType.INCOME.value:
            return abs(self.amount)
        return -abs(self.amount)
