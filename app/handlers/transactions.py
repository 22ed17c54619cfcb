"""REST endpoints for the transaction ledger."""
from aiohttp import web

from app.handlers.helpers import (
    path_int,
    query_date,
    query_enum,
    query_int,
    read_json,
    session_maker,
    summary_to_dict,
    tenant_id,
    transaction_to_dict,
    user_id,
)
from core.dto.transactions import ConfirmPaymentDTO, CreateTransactionDTO
from database.models import TransactionCategory, TransactionType
from services.transactions import LedgerRow, TransactionLedgerService


def setup_routes(app: web.Application):
    """Setup transaction routes."""
    app.router.add_get('/api/transactions', list_transactions)
    app.router.add_post('/api/transactions', create_transaction)
    app.router.add_get('/api/transactions/balance', get_balance)
    app.router.add_get('/api/transactions/summary', get_summary)
    app.router.add_patch('/api/transactions/{id}/confirm', confirm_payment)


async def list_transactions(request: web.Request):
    """Newest first with running balance; filters: ?type=, ?category=, ?client_id=."""
    type_ = query_enum(request, "type", TransactionType)
    category = query_enum(request, "category", TransactionCategory)
    async with session_maker(request)() as session:
        ledger = TransactionLedgerService(session, tenant_id(request), user_id(request))
        rows = await ledger.list(type_, category, query_int(request, "client_id"))
        return web.json_response([transaction_to_dict(r) for r in rows])


async def create_transaction(request: web.Request):
    data = CreateTransactionDTO(**await read_json(request))
    async with session_maker(request)() as session:
        ledger = TransactionLedgerService(session, tenant_id(request), user_id(request))
        tx = await ledger.create(data)
        await session.commit()
        balance = await ledger.current_balance()
        return web.json_response(
            transaction_to_dict(LedgerRow(transaction=tx, running_balance=balance)),
            status=201,
        )


async def get_balance(request: web.Request):
    async with session_maker(request)() as session:
        ledger = TransactionLedgerService(session, tenant_id(request), user_id(request))
        return web.json_response({"balance": await ledger.current_balance()})


async def get_summary(request: web.Request):
    """Totals, optionally limited to ?start=YYYY-MM-DD&end=YYYY-MM-DD."""
    async with session_maker(request)() as session:
        ledger = TransactionLedgerService(session, tenant_id(request), user_id(request))
        summary = await ledger.summary(query_date(request, "start"), query_date(request, "end"))
        return web.json_response(summary_to_dict(summary))


async def confirm_payment(request: web.Request):
    data = ConfirmPaymentDTO(**await read_json(request))
    async with session_maker(request)() as session:
        ledger = TransactionLedgerService(session, tenant_id(request), user_id(request))
        tx = await ledger.confirm_payment(path_int(request), data.payment_method)
        await session.commit()
        rows = {r.transaction.id: r for r in await ledger.list()}
        row = rows[tx.id]
        return web.json_response(transaction_to_dict(row))
