"""Training session model - a booked slot with a coach in a room."""
from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class SessionStatus(str, Enum):
    """Training session status."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrainingSession(Base):
    """Training session model."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    studio_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("studios.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    client_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    coach_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("coaches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    room_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True
    )

    # Package the session was paid from
    client_package_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("client_packages.id", ondelete="SET NULL"),
        nullable=True
    )

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=SessionStatus.SCHEDULED.value,
        nullable=False,
        index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<TrainingSession(id={self.id}, client_id={self.client_id}, "
            f"coach_id={self.coach_id}, start_time={self.start_time}, status='{self.status}')>"
        )
