"""REST endpoints for the waiting list."""
from aiohttp import web

from app.handlers.helpers import (
    coach_to_dict,
    client_package_to_dict,
    entry_to_dict,
    path_int,
    query_enum,
    query_int,
    read_json,
    session_maker,
    session_to_dict,
    tenant_id,
    user_id,
)
from core.dto.waiting_list import (
    BookSessionDTO,
    CreateWaitingListEntryDTO,
    MarkBookedDTO,
    UpdatePriorityDTO,
    UpdateWaitingListEntryDTO,
)
from database.models import WaitingListStatus
from services.use_cases import BookFromWaitingListUseCase
from services.waiting_list import WaitingListService


def setup_routes(app: web.Application):
    """Setup waiting list routes."""
    app.router.add_get('/api/waiting-list', list_entries)
    app.router.add_post('/api/waiting-list', create_entry)
    app.router.add_get('/api/waiting-list/client/{client_id}', get_client_entries)
    app.router.add_get('/api/waiting-list/{id}', get_entry)
    app.router.add_patch('/api/waiting-list/{id}', update_entry)
    app.router.add_delete('/api/waiting-list/{id}', remove_entry)
    app.router.add_patch('/api/waiting-list/{id}/approve', approve_entry)
    app.router.add_patch('/api/waiting-list/{id}/reject', reject_entry)
    app.router.add_patch('/api/waiting-list/{id}/priority', update_priority)
    app.router.add_patch('/api/waiting-list/{id}/book', mark_as_booked)
    app.router.add_post('/api/waiting-list/{id}/notify', notify_entry)
    app.router.add_get('/api/waiting-list/{id}/coaches', match_coaches)
    app.router.add_post('/api/waiting-list/{id}/book-session', book_session)


def _service(request: web.Request, session) -> WaitingListService:
    return WaitingListService(
        session,
        tenant_id(request),
        user_id(request),
        notifier=request.app.get("notifier"),
    )


async def list_entries(request: web.Request):
    """List entries by priority; filters: ?status=, ?studio_id=."""
    status = query_enum(request, "status", WaitingListStatus)
    async with session_maker(request)() as session:
        entries = await _service(request, session).list(status, query_int(request, "studio_id"))
        return web.json_response([entry_to_dict(e) for e in entries])


async def create_entry(request: web.Request):
    data = CreateWaitingListEntryDTO(**await read_json(request))
    async with session_maker(request)() as session:
        entry = await _service(request, session).create(data)
        await session.commit()
        return web.json_response(entry_to_dict(entry), status=201)


async def get_client_entries(request: web.Request):
    async with session_maker(request)() as session:
        entries = await _service(request, session).list_for_client(path_int(request, "client_id"))
        return web.json_response([entry_to_dict(e) for e in entries])


async def get_entry(request: web.Request):
    async with session_maker(request)() as session:
        entry = await _service(request, session).get(path_int(request))
        return web.json_response(entry_to_dict(entry))


async def update_entry(request: web.Request):
    data = UpdateWaitingListEntryDTO(**await read_json(request))
    async with session_maker(request)() as session:
        entry = await _service(request, session).update(path_int(request), data)
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def remove_entry(request: web.Request):
    async with session_maker(request)() as session:
        await _service(request, session).remove(path_int(request))
        await session.commit()
        return web.json_response({"success": True})


async def approve_entry(request: web.Request):
    async with session_maker(request)() as session:
        entry = await _service(request, session).approve(path_int(request), user_id(request))
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def reject_entry(request: web.Request):
    async with session_maker(request)() as session:
        entry = await _service(request, session).reject(path_int(request))
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def update_priority(request: web.Request):
    data = UpdatePriorityDTO(**await read_json(request))
    async with session_maker(request)() as session:
        entry = await _service(request, session).update_priority(path_int(request), data.priority)
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def mark_as_booked(request: web.Request):
    data = MarkBookedDTO(**await read_json(request))
    async with session_maker(request)() as session:
        entry = await _service(request, session).mark_as_booked(path_int(request), data.session_id)
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def notify_entry(request: web.Request):
    """Message the client and move the entry to notified."""
    async with session_maker(request)() as session:
        entry = await _service(request, session).notify(path_int(request))
        await session.commit()
        return web.json_response(entry_to_dict(entry))


async def match_coaches(request: web.Request):
    async with session_maker(request)() as session:
        coaches = await _service(request, session).match_coaches(path_int(request))
        return web.json_response([coach_to_dict(c) for c in coaches])


async def book_session(request: web.Request):
    """Create a session for the entry and mark it booked."""
    data = BookSessionDTO(**await read_json(request))
    async with session_maker(request)() as session:
        use_case = BookFromWaitingListUseCase(session, tenant_id(request), user_id(request))
        result = await use_case.execute(path_int(request), data)
        return web.json_response({
            "session": session_to_dict(result.session),
            "entry": entry_to_dict(result.entry),
            "client_package": (
                client_package_to_dict(result.client_package) if result.client_package else None
            ),
        }, status=201)
