"""REST endpoints for the package catalog and client packages."""
from aiohttp import web

from app.handlers.helpers import (
    client_package_to_dict,
    package_to_dict,
    path_int,
    query_bool,
    query_int,
    read_json,
    session_maker,
    tenant_id,
    user_id,
)
from app.config import settings
from core.dto.packages import (
    AdjustSessionsDTO,
    AssignPackageDTO,
    CreatePackageDTO,
    RenewPackageDTO,
    UpdatePackageDTO,
)
from services.packages import PackageService


def setup_routes(app: web.Application):
    """Setup package routes."""
    app.router.add_get('/api/packages', list_packages)
    app.router.add_post('/api/packages', create_package)
    app.router.add_patch('/api/packages/{id}', update_package)
    app.router.add_patch('/api/packages/{id}/archive', archive_package)

    app.router.add_post('/api/client-packages', assign_package)
    app.router.add_get('/api/client-packages/expiring', get_expiring_packages)
    app.router.add_get('/api/client-packages/client/{client_id}', get_client_packages)
    app.router.add_patch('/api/client-packages/{id}/use-session', use_session)
    app.router.add_patch('/api/client-packages/{id}/return-session', return_session)
    app.router.add_post('/api/client-packages/{id}/renew', renew_package)
    app.router.add_patch('/api/client-packages/{id}/adjust-sessions', adjust_sessions)


# ========== Catalog ==========

async def list_packages(request: web.Request):
    """List packages; ?include_inactive=true shows archived ones too."""
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        packages = await service.list_packages(query_bool(request, "include_inactive"))
        return web.json_response([package_to_dict(p) for p in packages])


async def create_package(request: web.Request):
    data = CreatePackageDTO(**await read_json(request))
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        package = await service.create_package(data)
        await session.commit()
        return web.json_response(package_to_dict(package), status=201)


async def update_package(request: web.Request):
    data = UpdatePackageDTO(**await read_json(request))
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        package = await service.update_package(path_int(request), data)
        await session.commit()
        return web.json_response(package_to_dict(package))


async def archive_package(request: web.Request):
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        package = await service.archive_package(path_int(request))
        await session.commit()
        return web.json_response(package_to_dict(package))


# ========== Client packages ==========

async def assign_package(request: web.Request):
    """Sell a package to a client."""
    data = AssignPackageDTO(**await read_json(request))
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        cp = await service.assign(data)
        await session.commit()
        return web.json_response(client_package_to_dict(cp), status=201)


async def get_expiring_packages(request: web.Request):
    """Active packages expiring within ?days (default 7) or nearly used up."""
    days = query_int(request, "days")
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        packages = await service.get_expiring_packages(
            days_ahead=7 if days is None else days,
            low_balance_threshold=settings.package_low_balance_threshold,
        )
        return web.json_response([client_package_to_dict(cp) for cp in packages])


async def get_client_packages(request: web.Request):
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        packages = await service.get_client_packages(path_int(request, "client_id"))
        return web.json_response([client_package_to_dict(cp) for cp in packages])


async def use_session(request: web.Request):
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        cp = await service.use_session(path_int(request))
        await session.commit()
        return web.json_response(client_package_to_dict(cp))


async def return_session(request: web.Request):
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        cp = await service.return_session(path_int(request))
        await session.commit()
        return web.json_response(client_package_to_dict(cp))


async def renew_package(request: web.Request):
    data = RenewPackageDTO(**await read_json(request))
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        cp = await service.renew(path_int(request), data)
        await session.commit()
        return web.json_response(client_package_to_dict(cp), status=201)


async def adjust_sessions(request: web.Request):
    data = AdjustSessionsDTO(**await read_json(request))
    async with session_maker(request)() as session:
        service = PackageService(session, tenant_id(request), user_id(request))
        cp = await service.adjust_sessions(path_int(request), data)
        await session.commit()
        return web.json_response(client_package_to_dict(cp))
