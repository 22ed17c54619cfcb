"""Coach model - trainer working at a studio."""
from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from database.base import Base, BigIntPK


class PreferredClientGender(str, Enum):
    """Which clients a coach prefers to train."""
    MALE = "male"
    FEMALE = "female"
    ANY = "any"


class Coach(Base):
    """Coach model."""

    __tablename__ = "coaches"

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

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    preferred_client_gender: Mapped[str] = mapped_column(
        String(10),
        default=PreferredClientGender.ANY.value,
        nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Coach(id={self.id}, studio_id={self.studio_id}, name='{self.name}')>"
