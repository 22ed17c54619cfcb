"""Database models package."""
from database.models.tenant import Tenant
from database.models.studio import Studio, Room
from database.models.client import Client, Gender
from database.models.coach import Coach, PreferredClientGender
from database.models.package import Package
from database.models.client_package import ClientPackage, ClientPackageStatus
from database.models.transaction import (
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from database.models.waiting_list import WaitingListEntry, WaitingListStatus
from database.models.session import TrainingSession, SessionStatus
from database.models.audit_log import AuditLog

__all__ = [
    "Tenant",
    "Studio",
    "Room",
    "Client",
    "Gender",
    "Coach",
    "PreferredClientGender",
    "Package",
    "ClientPackage",
    "ClientPackageStatus",
    "Transaction",
    "TransactionCategory",
    "TransactionStatus",
    "TransactionType",
    "WaitingListEntry",
    "WaitingListStatus",
    "TrainingSession",
    "SessionStatus",
    "AuditLog",
]
