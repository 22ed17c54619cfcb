"""
Base repository with common tenant-scoped operations.

Every table carries a tenant_id; lookups always filter by it so a row of
another tenant behaves exactly like a missing row.
"""
from typing import TypeVar, Generic, Optional, Type
from abc import ABC

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.base import Base

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Abstract base repository with common CRUD operations.

    Provides:
    - get_by_id: Get single entity of a tenant by ID
    - add: Add a new entity and flush it
    - delete: Delete an entity
    - flush: Flush pending changes

    Usage:
        class PackageRepository(BaseRepository[Package]):
            model_class = Package

            async def list_for_tenant(self, tenant_id: int):
                # Custom method
                ...
    """

    model_class: Type[ModelType]

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, tenant_id: int, entity_id: int) -> Optional[ModelType]:
        """
        Get entity by its primary key ID.

        Args:
            tenant_id: Owning tenant
            entity_id: Primary key ID

        Returns:
            Entity or None if not found for this tenant
        """
        result = await self.session.execute(
            select(self.model_class).where(
                self.model_class.id == entity_id,
                self.model_class.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, entity: ModelType) -> ModelType:
        """
        Add entity to session and flush it so the ID is assigned.

        Changes are flushed but not committed.
        """
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, entity: ModelType) -> None:
        """Delete an entity already loaded in this session."""
        await self.session.delete(entity)
        await self.session.flush()

    async def flush(self) -> None:
        """Flush session changes to database."""
        await self.session.flush()
