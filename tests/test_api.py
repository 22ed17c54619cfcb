"""REST API tests through the aiohttp test client."""
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from aiohttp import test_utils

from app.main import build_app
from services.notifications import TelegramNotifier

API_TOKEN = "test-token"


@pytest.fixture
def mock_bot():
    return AsyncMock()


@pytest_asyncio.fixture
async def api(session_maker, mock_bot):
    app = build_app(
        session_maker=session_maker,
        notifier=TelegramNotifier(mock_bot),
        api_token=API_TOKEN,
    )
    client = test_utils.TestClient(test_utils.TestServer(app))
    await client.start_server()
    yield client
    await client.close()


@pytest.fixture
def headers(tenant):
    return {
        "Authorization": f"Bearer {API_TOKEN}",
        "X-Tenant-Id": str(tenant.id),
        "X-User-Id": "9",
    }


@pytest.mark.asyncio
async def test_health_is_public(api):
    resp = await api.get("/health")
    assert resp.status == 200
    data = await resp.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"


@pytest.mark.asyncio
async def test_missing_token_rejected(api, tenant):
    resp = await api.get("/api/packages", headers={"X-Tenant-Id": str(tenant.id)})
    assert resp.status == 401


@pytest.mark.asyncio
async def test_missing_tenant_rejected(api):
    resp = await api.get("/api/packages", headers={"Authorization": f"Bearer {API_TOKEN}"})
    assert resp.status == 403
    assert "X-Tenant-Id" in (await resp.json())["error"]


@pytest.mark.asyncio
async def test_package_catalog(api, headers):
    resp = await api.post("/api/packages", json={
        "name": "5 EMS sessions", "total_sessions": 5, "price": 55, "validity_days": 30,
    }, headers=headers)
    assert resp.status == 201
    package = await resp.json()

    resp = await api.patch(f"/api/packages/{package['id']}", json={"price": 50}, headers=headers)
    assert resp.status == 200
    assert (await resp.json())["price"] == 50

    resp = await api.patch(f"/api/packages/{package['id']}/archive", headers=headers)
    assert (await resp.json())["is_active"] is False

    resp = await api.get("/api/packages", headers=headers)
    assert await resp.json() == []

    resp = await api.get("/api/packages?include_inactive=true", headers=headers)
    assert [p["id"] for p in await resp.json()] == [package["id"]]


@pytest.mark.asyncio
async def test_invalid_package_payload(api, headers):
    resp = await api.post("/api/packages", json={
        "name": "Broken", "total_sessions": 0, "price": -1, "validity_days": 30,
    }, headers=headers)
    assert resp.status == 400
    fields = {d["field"] for d in (await resp.json())["details"]}
    assert {"total_sessions", "price"} <= fields


@pytest.mark.asyncio
async def test_client_package_lifecycle(api, headers, client, package):
    resp = await api.post("/api/client-packages", json={
        "client_id": client.id, "package_id": package.id, "payment_method": "cash",
    }, headers=headers)
    assert resp.status == 201
    cp = await resp.json()
    assert cp["sessions_remaining"] == 10
    assert cp["status"] == "active"

    resp = await api.patch(f"/api/client-packages/{cp['id']}/use-session", headers=headers)
    assert (await resp.json())["sessions_remaining"] == 9

    resp = await api.patch(f"/api/client-packages/{cp['id']}/return-session", headers=headers)
    assert (await resp.json())["sessions_remaining"] == 10

    resp = await api.patch(f"/api/client-packages/{cp['id']}/adjust-sessions", json={
        "adjustment": -10, "reason": "Transferred",
    }, headers=headers)
    assert (await resp.json())["status"] == "depleted"

    resp = await api.patch(f"/api/client-packages/{cp['id']}/use-session", headers=headers)
    assert resp.status == 400

    resp = await api.post(f"/api/client-packages/{cp['id']}/renew", json={
        "payment_method": "card",
    }, headers=headers)
    assert resp.status == 201
    renewed = await resp.json()
    assert renewed["renewed_from_id"] == cp["id"]

    resp = await api.get(f"/api/client-packages/client/{client.id}", headers=headers)
    assert [p["id"] for p in await resp.json()] == [renewed["id"], cp["id"]]

    resp = await api.get("/api/client-packages/expiring?days=60", headers=headers)
    assert [p["id"] for p in await resp.json()] == [renewed["id"]]


@pytest.mark.asyncio
async def test_unknown_client_package_is_404(api, headers):
    resp = await api.patch("/api/client-packages/4242/use-session", headers=headers)
    assert resp.status == 404


@pytest.mark.asyncio
async def test_waiting_list_flow(api, headers, mock_bot, client, studio, coach, package):
    await api.post("/api/client-packages", json={
        "client_id": client.id, "package_id": package.id, "payment_method": "cash",
    }, headers=headers)

    resp = await api.post("/api/waiting-list", json={
        "client_id": client.id, "studio_id": studio.id, "requires_approval": True,
    }, headers=headers)
    assert resp.status == 201
    entry = await resp.json()
    assert entry["status"] == "pending"

    resp = await api.patch(f"/api/waiting-list/{entry['id']}/book", json={}, headers=headers)
    assert resp.status == 409

    resp = await api.patch(f"/api/waiting-list/{entry['id']}/approve", headers=headers)
    approved = await resp.json()
    assert approved["status"] == "approved"
    assert approved["approved_by"] == 9

    resp = await api.post(f"/api/waiting-list/{entry['id']}/notify", headers=headers)
    assert (await resp.json())["status"] == "notified"
    assert mock_bot.send_message.await_count == 1

    resp = await api.get(f"/api/waiting-list/{entry['id']}/coaches", headers=headers)
    assert [c["id"] for c in await resp.json()] == [coach.id]

    resp = await api.post(f"/api/waiting-list/{entry['id']}/book-session", json={
        "coach_id": coach.id, "start_time": "2026-11-02T10:00:00+00:00",
    }, headers=headers)
    assert resp.status == 201
    booking = await resp.json()
    assert booking["entry"]["status"] == "booked"
    assert booking["client_package"]["sessions_remaining"] == 9

    resp = await api.patch(f"/api/waiting-list/{entry['id']}/reject", headers=headers)
    assert resp.status == 409

    resp = await api.patch(f"/api/sessions/{booking['session']['id']}/cancel", headers=headers)
    assert (await resp.json())["status"] == "cancelled"

    resp = await api.get(f"/api/client-packages/client/{client.id}", headers=headers)
    assert (await resp.json())[0]["sessions_remaining"] == 10


@pytest.mark.asyncio
async def test_waiting_list_queries(api, headers, client, studio):
    first = await (await api.post("/api/waiting-list", json={
        "client_id": client.id, "studio_id": studio.id,
    }, headers=headers)).json()
    second = await (await api.post("/api/waiting-list", json={
        "client_id": client.id, "studio_id": studio.id, "requires_approval": True,
    }, headers=headers)).json()

    resp = await api.patch(f"/api/waiting-list/{second['id']}/priority", json={"priority": 1}, headers=headers)
    assert (await resp.json())["priority"] == 1

    resp = await api.get("/api/waiting-list", headers=headers)
    assert [e["id"] for e in await resp.json()] == [second["id"], first["id"]]

    resp = await api.get("/api/waiting-list?status=pending", headers=headers)
    assert [e["id"] for e in await resp.json()] == [second["id"]]

    resp = await api.get("/api/waiting-list?status=bogus", headers=headers)
    assert resp.status == 400

    resp = await api.patch(f"/api/waiting-list/{first['id']}", json={"notes": "Mornings only"}, headers=headers)
    assert (await resp.json())["notes"] == "Mornings only"

    resp = await api.get(f"/api/waiting-list/client/{client.id}", headers=headers)
    assert len(await resp.json()) == 2

    resp = await api.delete(f"/api/waiting-list/{first['id']}", headers=headers)
    assert resp.status == 200
    resp = await api.get(f"/api/waiting-list/{first['id']}", headers=headers)
    assert resp.status == 404


@pytest.mark.asyncio
async def test_transactions(api, headers):
    for payload in (
        {"type": "income", "amount": 100, "category": "session_fee"},
        {"type": "expense", "amount": 30, "description": "Cleaning"},
        {"type": "refund", "amount": 10, "category": "refund"},
        {"type": "income", "amount": 25, "status": "pending"},
    ):
        resp = await api.post("/api/transactions", json=payload, headers=headers)
        assert resp.status == 201

    resp = await api.get("/api/transactions/summary", headers=headers)
    summary = await resp.json()
    assert summary["net"] == 85

    resp = await api.get("/api/transactions/balance", headers=headers)
    assert (await resp.json())["balance"] == 60

    resp = await api.get("/api/transactions", headers=headers)
    rows = await resp.json()
    assert rows[0]["status"] == "pending"
    assert rows[0]["running_balance"] == 60

    resp = await api.patch(f"/api/transactions/{rows[0]['id']}/confirm", json={
        "payment_method": "cash",
    }, headers=headers)
    assert resp.status == 200
    assert (await resp.json())["running_balance"] == 85

    resp = await api.patch(f"/api/transactions/{rows[0]['id']}/confirm", json={
        "payment_method": "cash",
    }, headers=headers)
    assert resp.status == 409

    resp = await api.get("/api/transactions?type=expense", headers=headers)
    assert [r["amount"] for r in await resp.json()] == [30]


@pytest.mark.asyncio
async def test_invalid_json_body(api, headers):
    resp = await api.post(
        "/api/transactions",
        data="not json",
        headers={**headers, "Content-Type": "application/json"},
    )
    assert resp.status == 400


@pytest.mark.asyncio
async def test_body_that_is_not_utf8(api, headers):
    resp = await api.post(
        "/api/transactions",
        data=b'{"type": "income", "amount": 10, "description": "\xff\xfe"}',
        headers={**headers, "Content-Type": "application/json"},
    )
    assert resp.status == 400
    assert (await resp.json())["error"]
