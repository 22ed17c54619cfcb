"""
Base use case class with common functionality.
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional

from sqlalchemy.ext.asyncio import AsyncSession


ResultType = TypeVar("ResultType")


class BaseUseCase(ABC, Generic[ResultType]):
    """
    Abstract base class for use cases.

    A use case spans several services of one tenant and, unlike the services
    themselves, decides where the unit of work is committed.
    """

    def __init__(self, session: AsyncSession, tenant_id: int, user_id: Optional[int] = None):
        """
        Args:
            session: Async SQLAlchemy session for database operations
            tenant_id: Tenant every lookup is scoped to
            user_id: Staff member performing the action
        """
        self.session = session
        self.tenant_id = tenant_id
        self.user_id = user_id

    @abstractmethod
    async def execute(self, *args, **kwargs) -> ResultType:
        """
        Execute the use case.

        Subclasses must implement this method with their specific logic.
        """
        pass
