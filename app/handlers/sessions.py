"""REST endpoints for training sessions."""
from aiohttp import web

from app.handlers.helpers import path_int, session_maker, session_to_dict, tenant_id, user_id
from services.use_cases import CancelSessionUseCase


def setup_routes(app: web.Application):
    """Setup session routes."""
    app.router.add_patch('/api/sessions/{id}/cancel', cancel_session)


async def cancel_session(request: web.Request):
    """Cancel a scheduled session; its package gets the session back."""
    async with session_maker(request)() as session:
        use_case = CancelSessionUseCase(session, tenant_id(request), user_id(request))
        training = await use_case.execute(path_int(request))
        return web.json_response(session_to_dict(training))
