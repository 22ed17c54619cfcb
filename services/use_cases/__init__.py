"""
Use Cases package for business logic encapsulation.

This package contains use case classes that encapsulate business logic
and orchestrate interactions between repositories and services.
"""

from services.use_cases.booking import (
    BookingResult,
    BookFromWaitingListUseCase,
    CancelSessionUseCase,
)

__all__ = [
    'BookingResult',
    'BookFromWaitingListUseCase',
    'CancelSessionUseCase',
]
