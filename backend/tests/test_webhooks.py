"""
Webhook de pedido creado y sonda de salud.
"""

import pytest

from conftest import make_order_payload

WEBHOOK_URL = "/api/v1/webhooks/order-created"
SECRET_HEADERS = {"x-webhook-secret": "test-webhook-secret"}


async def _create_order(client):
    response = await client.post("/api/v1/orders", json=make_order_payload())
    return response.json()["orderId"]


@pytest.mark.parametrize("headers", [{}, {"x-webhook-secret": "otro"}])
async def test_webhook_rejects_missing_or_wrong_secret(client, integrations, headers):
    response = await client.post(WEBHOOK_URL, json={"id": 1}, headers=headers)

    assert response.status_code == 401


async def test_webhook_rejects_everything_when_secret_not_configured(client, monkeypatch):
    from app.api.v1.endpoints import webhooks

    monkeypatch.setattr(webhooks.settings, "WEBHOOK_SECRET", None)

    response = await client.post(WEBHOOK_URL, json={"id": 1}, headers=SECRET_HEADERS)

    assert response.status_code == 401


@pytest.mark.parametrize("payload_for", [
    lambda order_id: {"record": {"id": order_id}},
    lambda order_id: {"id": str(order_id)},
])
async def test_webhook_appends_order_to_sheet(client, integrations, payload_for):
    order_id = await _create_order(client)
    integrations["sheet_append"].reset_mock()

    response = await client.post(
        WEBHOOK_URL,
        json=payload_for(order_id),
        headers={"x-supabase-signature": "test-webhook-secret"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    order_data = integrations["sheet_append"].await_args.args[0]
    assert order_data["id"] == order_id
    assert order_data["products"][0]["patient_name"] == "Luis"


async def test_webhook_without_id_returns_400(client):
    response = await client.post(WEBHOOK_URL, json={"record": {}}, headers=SECRET_HEADERS)

    assert response.status_code == 400


async def test_webhook_for_unknown_order_returns_404(client):
    response = await client.post(WEBHOOK_URL, json={"id": 12345}, headers=SECRET_HEADERS)

    assert response.status_code == 404


async def test_webhook_sheet_failure_returns_500(client, integrations):
    order_id = await _create_order(client)
    integrations["sheet_append"].return_value = {"success": False, "error": "Hoja no encontrada"}

    response = await client.post(WEBHOOK_URL, json={"id": order_id}, headers=SECRET_HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Error al sincronizar con Google Sheets"}


async def test_health_reports_healthy(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"]["database"] == "connected"


async def test_health_reports_unhealthy_without_database(bare_engine, client_for_engine):
    async with client_for_engine(bare_engine) as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


async def test_root_endpoint(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert "Underfeet Pedidos API" in response.json()["message"]
