"""Database repositories package."""
from database.repositories.roster import (
    ClientRepository,
    CoachRepository,
    RoomRepository,
    StudioRepository,
)
from database.repositories.package import ClientPackageRepository, PackageRepository
from database.repositories.transaction import TransactionRepository
from database.repositories.waiting_list import WaitingListRepository
from database.repositories.session import SessionRepository
from database.repositories.audit_log import AuditLogRepository

__all__ = [
    "ClientRepository",
    "CoachRepository",
    "RoomRepository",
    "StudioRepository",
    "PackageRepository",
    "ClientPackageRepository",
    "TransactionRepository",
    "WaitingListRepository",
    "SessionRepository",
    "AuditLogRepository",
]
