"""Waiting list entry model - a queued request for a session slot."""
from datetime import date, datetime
from enum import Enum

from sqlalchemy import BigInteger, String, Boolean, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class WaitingListStatus(str, Enum):
    """Waiting list entry status."""
    PENDING = "pending"  # Waiting for staff approval
    APPROVED = "approved"  # Approved, waiting for a free slot
    NOTIFIED = "notified"  # Client told a slot is available
    BOOKED = "booked"  # Session booked
    CANCELLED = "cancelled"  # Rejected or withdrawn


WAITING_LIST_TRANSITIONS: dict[WaitingListStatus, frozenset[WaitingListStatus]] = {
    WaitingListStatus.PENDING: frozenset({WaitingListStatus.APPROVED, WaitingListStatus.CANCELLED}),
    WaitingListStatus.APPROVED: frozenset({
        WaitingListStatus.NOTIFIED,
        WaitingListStatus.BOOKED,
        WaitingListStatus.CANCELLED,
    }),
    WaitingListStatus.NOTIFIED: frozenset({WaitingListStatus.BOOKED}),
    WaitingListStatus.BOOKED: frozenset(),
    WaitingListStatus.CANCELLED: frozenset(),
}


class WaitingListEntry(Base):
    """Waiting list entry model."""

    __tablename__ = "waiting_list"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    client_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    studio_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    coach_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("coaches.id", ondelete="SET NULL"),
        nullable=True
    )
    session_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("sessions.id", ondelete="SET NULL"),
        nullable=True
    )

    # Client preferences
    preferred_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    preferred_time_slot: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=WaitingListStatus.PENDING.value,
        nullable=False,
        index=True
    )
    requires_approval: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Lower number = served first
    priority: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # Workflow stamps
    approved_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notification_method: Mapped[str | None] = mapped_column(String(20), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<WaitingListEntry(id={self.id}, client_id={self.client_id}, "
            f"status='{self.status}', priority={self.priority})>"
        )

    def can_transition_to(self, target: WaitingListStatus) -> bool:
        """Check the transition table for a move from the current status."""
        return target in WAITING_LIST_TRANSITIONS[WaitingListStatus(self.status)]
