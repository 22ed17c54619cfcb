"""Client model - a studio member."""
from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class Gender(str, Enum):
    """Client/coach gender."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Personal info
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="male, female, other, prefer_not_to_say"
    )

    # Telegram chat used for notifications
    telegram_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    @property
    def has_gender(self) -> bool:
        """Whether the client disclosed a gender."""
        return self.gender not in (None, "", Gender.PREFER_NOT_TO_SAY.value)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}')>"
