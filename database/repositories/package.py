"""Package and client package repositories."""
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import select, and_, or_, func

from database.models import ClientPackage, ClientPackageStatus, Package
from database.repositories.base import BaseRepository


class PackageRepository(BaseRepository[Package]):
    """Repository for the package catalog."""

    model_class = Package

    async def list_for_tenant(
        self,
        tenant_id: int,
        include_inactive: bool = False,
    ) -> List[Package]:
        """Get packages of a tenant ordered by name."""
        query = select(Package).where(Package.tenant_id == tenant_id)
        if not include_inactive:
            query = query.where(Package.is_active.is_(True))
        query = query.order_by(Package.name, Package.id)

        result = await self.session.execute(query)
        return list(result.scalars().all())


class ClientPackageRepository(BaseRepository[ClientPackage]):
    """Repository for client package cycles."""

    model_class = ClientPackage

    async def get_by_client(self, tenant_id: int, client_id: int) -> List[ClientPackage]:
        """Get all cycles of a client, newest first."""
        result = await self.session.execute(
            select(ClientPackage)
            .where(
                ClientPackage.tenant_id == tenant_id,
                ClientPackage.client_id == client_id,
            )
            .order_by(ClientPackage.purchase_date.desc(), ClientPackage.id.desc())
        )
        return list(result.scalars().all())

    async def get_usable_for_client(
        self,
        tenant_id: int,
        client_id: int,
        today: date,
    ) -> List[ClientPackage]:
        """Get packages a session can be taken from, soonest expiry first."""
        result = await self.session.execute(
            select(ClientPackage)
            .where(
                ClientPackage.tenant_id == tenant_id,
                ClientPackage.client_id == client_id,
                ClientPackage.status == ClientPackageStatus.ACTIVE.value,
                ClientPackage.sessions_remaining > 0,
                ClientPackage.expiry_date >= today,
            )
            .order_by(ClientPackage.expiry_date, ClientPackage.id)
        )
        return list(result.scalars().all())

    async def get_expiring(
        self,
        today: date,
        days_ahead: int,
        low_balance_threshold: int = 1,
        tenant_id: Optional[int] = None,
    ) -> List[ClientPackage]:
        """
        Get active packages that need attention soon.

        A package qualifies when it expires within ``days_ahead`` days or has
        ``low_balance_threshold`` sessions left or fewer. Pass ``tenant_id=None``
        to scan every tenant (used by the scheduled monitor).
        """
        query = select(ClientPackage).where(
            and_(
                ClientPackage.status == ClientPackageStatus.ACTIVE.value,
                ClientPackage.expiry_date >= today,
                or_(
                    ClientPackage.expiry_date <= today + timedelta(days=days_ahead),
                    ClientPackage.sessions_remaining <= low_balance_threshold,
                ),
            )
        )
        if tenant_id is not None:
            query = query.where(ClientPackage.tenant_id == tenant_id)
        query = query.order_by(ClientPackage.expiry_date, ClientPackage.id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_overdue(self, today: date) -> List[ClientPackage]:
        """Get packages still stored as active although their expiry date passed."""
        result = await self.session.execute(
            select(ClientPackage).where(
                ClientPackage.status == ClientPackageStatus.ACTIVE.value,
                ClientPackage.expiry_date < today,
            )
        )
        return list(result.scalars().all())

    async def count_for_package(self, tenant_id: int, package_id: int) -> int:
        """Count how many times a package has been sold."""
        result = await self.session.execute(
            select(func.count(ClientPackage.id)).where(
                ClientPackage.tenant_id == tenant_id,
                ClientPackage.package_id == package_id,
            )
        )
        return result.scalar() or 0
