"""ClientPackage model - one purchase/renewal cycle of a package."""
from datetime import date, datetime
from enum import Enum

from sqlalchemy import BigInteger, String, Integer, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class ClientPackageStatus(str, Enum):
    """Client package status."""
    ACTIVE = "active"
    EXPIRED = "expired"
    DEPLETED = "depleted"


# Allowed status changes; anything else is a bug in the caller
CLIENT_PACKAGE_TRANSITIONS: dict[ClientPackageStatus, frozenset[ClientPackageStatus]] = {
    ClientPackageStatus.ACTIVE: frozenset({ClientPackageStatus.DEPLETED, ClientPackageStatus.EXPIRED}),
    ClientPackageStatus.DEPLETED: frozenset({ClientPackageStatus.ACTIVE}),
    ClientPackageStatus.EXPIRED: frozenset(),
}


class ClientPackage(Base):
    """Client package model."""

    __tablename__ = "client_packages"

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
    package_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("packages.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    # Session counters
    sessions_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sessions_remaining: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=ClientPackageStatus.ACTIVE.value,
        nullable=False,
        index=True
    )

    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Payment
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    payment_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Previous cycle when this row was created by a renewal
    renewed_from_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("client_packages.id", ondelete="SET NULL"),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<ClientPackage(id={self.id}, client_id={self.client_id}, "
            f"remaining={self.sessions_remaining}, status='{self.status}')>"
        )

    def status_on(self, today: date) -> ClientPackageStatus:
        """Status as seen on a given day; active packages past expiry read as expired."""
        status = ClientPackageStatus(self.status)
        if status == ClientPackageStatus.ACTIVE and self.expiry_date < today:
            return ClientPackageStatus.EXPIRED
        return status

    @property
    def current_status(self) -> ClientPackageStatus:
        """Status as seen today."""
        return self.status_on(date.today())

    @property
    def is_usable(self) -> bool:
        """Check if a session can be taken from this package today."""
        return (
            self.current_status == ClientPackageStatus.ACTIVE
            and self.sessions_remaining > 0
        )

    @property
    def days_remaining(self) -> int:
        """Days left until expiry."""
        if self.current_status != ClientPackageStatus.ACTIVE:
            return 0
        return max(0, (self.expiry_date - date.today()).days)

    def can_transition_to(self, target: ClientPackageStatus) -> bool:
        """Check the transition table for a move from the stored status."""
        return target in CLIENT_PACKAGE_TRANSITIONS[ClientPackageStatus(self.status)]
