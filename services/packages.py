"""Package catalog and client package credit ledger."""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.dto.packages import (
    AdjustSessionsDTO,
    AssignPackageDTO,
    CreatePackageDTO,
    RenewPackageDTO,
    UpdatePackageDTO,
)
from core.dto.transactions import CreateTransactionDTO
from core.exceptions import (
    ClientNotFoundError,
    ClientPackageNotFoundError,
    InvalidAdjustmentError,
    PackageInactiveError,
    PackageLockedError,
    PackageNotFoundError,
    PackageUnavailableError,
)
from database.models import (
    ClientPackage,
    ClientPackageStatus,
    Package,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from database.repositories import (
    ClientPackageRepository,
    ClientRepository,
    PackageRepository,
)
from services.audit import AuditService
from services.transactions import CLIENT_PACKAGE_REFERENCE, TransactionLedgerService

logger = logging.getLogger(__name__)

# Terms that freeze once a package has been sold
LOCKED_PACKAGE_FIELDS = ("total_sessions", "price", "validity_days")
# Catalog fields a PATCH may clear with null
NULLABLE_PACKAGE_FIELDS = ("description",)


class PackageService:
    """
    Sellable packages and the per-client cycles bought from them.

    All methods flush; the caller owns the commit.
    """

    def __init__(self, session: AsyncSession, tenant_id: int, user_id: Optional[int] = None):
        self.session = session
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.packages = PackageRepository(session)
        self.client_packages = ClientPackageRepository(session)
        self.clients = ClientRepository(session)
        self.audit = AuditService(session, tenant_id, user_id)

    # ============== Catalog ==============

    async def list_packages(self, include_inactive: bool = False) -> List[Package]:
        return await self.packages.list_for_tenant(self.tenant_id, include_inactive)

    async def get_package(self, package_id: int) -> Package:
        package = await self.packages.get_by_id(self.tenant_id, package_id)
        if not package:
            raise PackageNotFoundError(package_id)
        return package

    async def create_package(self, data: CreatePackageDTO) -> Package:
        package = await self.packages.add(Package(
            tenant_id=self.tenant_id,
            name=data.name,
            description=data.description,
            total_sessions=data.total_sessions,
            price=data.price,
            validity_days=data.validity_days,
            is_active=True,
        ))
        await self.audit.log(
            "CREATE_PACKAGE",
            "Package",
            package.id,
            {"name": package.name, "price": package.price},
        )
        logger.info(f"Package {package.id} '{package.name}' created", extra={"tenant_id": self.tenant_id})
        return package

    async def update_package(self, package_id: int, data: UpdatePackageDTO) -> Package:
        """
        Update catalog fields.

        Raises:
            PackageLockedError: Sessions, price or validity change on a sold package
        """
        package = await self.get_package(package_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_PACKAGE_FIELDS
        }

        terms_changed = any(
            field in changes and changes[field] != getattr(package, field)
            for field in LOCKED_PACKAGE_FIELDS
        )
        if terms_changed and await self.client_packages.count_for_package(self.tenant_id, package_id):
            raise PackageLockedError()

        for field, value in changes.items():
            setattr(package, field, value)
        await self.packages.flush()

        await self.audit.log("UPDATE_PACKAGE", "Package", package.id, {"changes": changes})
        return package

    async def archive_package(self, package_id: int) -> Package:
        """Hide a package from sale; existing client cycles are untouched."""
        return await self.update_package(package_id, UpdatePackageDTO(is_active=False))

    # ============== Client packages ==============

    async def get_client_package(self, client_package_id: int) -> ClientPackage:
        cp = await self.client_packages.get_by_id(self.tenant_id, client_package_id)
        if not cp:
            raise ClientPackageNotFoundError(client_package_id)
        return cp

    async def assign(
        self,
        data: AssignPackageDTO,
        renewed_from_id: Optional[int] = None,
    ) -> ClientPackage:
        """
        Sell a package to a client.

        Creates the cycle with the package's full session count, an income
        transaction for the price (paid when a payment method is given,
        pending otherwise; none for free packages) and an audit row.

        Raises:
            ClientNotFoundError: Unknown client
            PackageNotFoundError: Unknown package
            PackageInactiveError: Package is archived
        """
        client = await self.clients.get_by_id(self.tenant_id, data.client_id)
        if not client:
            raise ClientNotFoundError(data.client_id)

        package = await self.get_package(data.package_id)
        if not package.is_active:
            raise PackageInactiveError()

        purchase_date = data.purchase_date or date.today()
        paid = bool(data.payment_method)

        cp = await self.client_packages.add(ClientPackage(
            tenant_id=self.tenant_id,
            client_id=client.id,
            package_id=package.id,
            sessions_used=0,
            sessions_remaining=package.total_sessions,
            status=ClientPackageStatus.ACTIVE.value,
            purchase_date=purchase_date,
            expiry_date=purchase_date + timedelta(days=package.validity_days),
            payment_method=data.payment_method,
            payment_notes=data.payment_notes,
            paid_at=datetime.now(timezone.utc) if paid else None,
            renewed_from_id=renewed_from_id,
        ))

        if package.price > 0:
            ledger = TransactionLedgerService(self.session, self.tenant_id, self.user_id)
            await ledger.create(CreateTransactionDTO(
                type=TransactionType.INCOME,
                category=TransactionCategory.PACKAGE_SALE,
                amount=package.price,
                description=f'Package "{package.name}" sold to {client.name}',
                status=TransactionStatus.PAID if paid else TransactionStatus.PENDING,
                payment_method=data.payment_method,
                client_id=client.id,
                reference_type=CLIENT_PACKAGE_REFERENCE,
                reference_id=cp.id,
            ))

        await self.audit.log(
            "ASSIGN_PACKAGE",
            "ClientPackage",
            cp.id,
            {
                "client_id": client.id,
                "package_id": package.id,
                "price": package.price,
                "payment_method": data.payment_method,
                "renewed_from_id": renewed_from_id,
            },
        )
        logger.info(
            f"Package {package.id} assigned to client {client.id} as cycle {cp.id}",
            extra={"tenant_id": self.tenant_id, "client_id": client.id, "entity_id": cp.id},
        )
        return cp

    async def use_session(self, client_package_id: int) -> ClientPackage:
        """
        Take one session from a package.

        Raises:
            PackageUnavailableError: Package is depleted or expired
        """
        cp = await self.get_client_package(client_package_id)
        if not cp.is_usable:
            raise PackageUnavailableError(cp.current_status.value, cp.sessions_remaining)

        cp.sessions_remaining -= 1
        cp.sessions_used += 1
        if cp.sessions_remaining == 0:
            cp.status = ClientPackageStatus.DEPLETED.value
            logger.info(
                f"Client package {cp.id} depleted",
                extra={"tenant_id": self.tenant_id, "entity_id": cp.id},
            )

        await self.client_packages.flush()
        return cp

    async def return_session(self, client_package_id: int) -> ClientPackage:
        """
        Credit back one used session, e.g. when a booked session is cancelled.

        Raises:
            InvalidAdjustmentError: No session has been used yet
        """
        cp = await self.get_client_package(client_package_id)
        if cp.sessions_used <= 0:
            raise InvalidAdjustmentError("No used sessions to return")

        cp.sessions_used -= 1
        cp.sessions_remaining += 1
        if cp.status == ClientPackageStatus.DEPLETED.value:
            cp.status = ClientPackageStatus.ACTIVE.value

        await self.client_packages.flush()
        logger.info(
            f"Session returned to client package {cp.id}",
            extra={"tenant_id": self.tenant_id, "entity_id": cp.id},
        )
        return cp

    async def renew(self, client_package_id: int, data: RenewPackageDTO) -> ClientPackage:
        """
        Close the current cycle and start a new one for the same client.

        An active cycle is closed as expired, a depleted one stays depleted.
        The new cycle uses ``new_package_id`` or the same package.
        """
        old = await self.get_client_package(client_package_id)
        if old.status == ClientPackageStatus.ACTIVE.value:
            old.status = ClientPackageStatus.EXPIRED.value
            await self.client_packages.flush()

        return await self.assign(
            AssignPackageDTO(
                client_id=old.client_id,
                package_id=data.new_package_id or old.package_id,
                payment_method=data.payment_method,
                payment_notes=data.payment_notes,
            ),
            renewed_from_id=old.id,
        )

    async def adjust_sessions(self, client_package_id: int, data: AdjustSessionsDTO) -> ClientPackage:
        """
        Manually correct remaining sessions.

        Raises:
            InvalidAdjustmentError: Result would be negative or adjustment is zero
        """
        if data.adjustment == 0:
            raise InvalidAdjustmentError("Adjustment must not be zero")

        cp = await self.get_client_package(client_package_id)
        old_remaining = cp.sessions_remaining
        new_remaining = old_remaining + data.adjustment
        if new_remaining < 0:
            raise InvalidAdjustmentError(
                f"Cannot decrease sessions by {abs(data.adjustment)}. "
                f"Client only has {old_remaining} remaining."
            )

        cp.sessions_remaining = new_remaining
        if new_remaining == 0 and cp.can_transition_to(ClientPackageStatus.DEPLETED):
            cp.status = ClientPackageStatus.DEPLETED.value
        elif new_remaining > 0 and cp.status == ClientPackageStatus.DEPLETED.value:
            cp.status = ClientPackageStatus.ACTIVE.value

        await self.client_packages.flush()
        await self.audit.log(
            "ADJUST_PACKAGE_SESSIONS",
            "ClientPackage",
            cp.id,
            {
                "adjustment": data.adjustment,
                "reason": data.reason,
                "old_remaining": old_remaining,
                "new_remaining": new_remaining,
            },
        )
        logger.info(
            f"Client package {cp.id} adjusted {old_remaining} -> {new_remaining}: {data.reason}",
            extra={"tenant_id": self.tenant_id, "entity_id": cp.id},
        )
        return cp

    # ============== Queries ==============

    async def get_client_packages(self, client_id: int) -> List[ClientPackage]:
        """All cycles of a client, newest first."""
        return await self.client_packages.get_by_client(self.tenant_id, client_id)

    async def find_best_package_for_session(self, client_id: int) -> Optional[ClientPackage]:
        """Usable package of the client that expires first."""
        usable = await self.client_packages.get_usable_for_client(
            self.tenant_id, client_id, date.today()
        )
        return usable[0] if usable else None

    async def get_expiring_packages(
        self,
        days_ahead: int = 7,
        low_balance_threshold: int = 1,
    ) -> List[ClientPackage]:
        """Active packages expiring within ``days_ahead`` days or nearly used up."""
        return await self.client_packages.get_expiring(
            date.today(),
            days_ahead,
            low_balance_threshold,
            tenant_id=self.tenant_id,
        )
