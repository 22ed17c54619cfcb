"""
Data Transfer Objects (DTOs) for data validation.

This package contains Pydantic models for validating input data.
"""

from core.dto.packages import (
    CreatePackageDTO,
    UpdatePackageDTO,
    AssignPackageDTO,
    RenewPackageDTO,
    AdjustSessionsDTO,
)
from core.dto.waiting_list import (
    CreateWaitingListEntryDTO,
    UpdateWaitingListEntryDTO,
    UpdatePriorityDTO,
    MarkBookedDTO,
    BookSessionDTO,
)
from core.dto.transactions import (
    CreateTransactionDTO,
    ConfirmPaymentDTO,
)

__all__ = [
    'CreatePackageDTO',
    'UpdatePackageDTO',
    'AssignPackageDTO',
    'RenewPackageDTO',
    'AdjustSessionsDTO',
    'CreateWaitingListEntryDTO',
    'UpdateWaitingListEntryDTO',
    'UpdatePriorityDTO',
    'MarkBookedDTO',
    'BookSessionDTO',
    'CreateTransactionDTO',
    'ConfirmPaymentDTO',
]
