"""
Pruebas de integraciones desde el panel.
"""

from unittest.mock import AsyncMock, MagicMock

from google.auth.exceptions import RefreshError

from app.services.google_sheets_service import google_sheets_service

from conftest import make_order_payload


async def test_integrations_report_pending_when_unconfigured(client, admin_headers, monkeypatch):
    monkeypatch.setattr(google_sheets_service, "service", None)

    response = await client.post("/api/v1/admin/test-integrations", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["results"]["database"]["status"] == "success"
    assert body["results"]["email"]["status"] == "pending"
    assert body["results"]["googleSheets"]["status"] == "pending"


async def test_integrations_all_successful(client, admin_headers, monkeypatch):
    from app.services import email_service

    monkeypatch.setattr(email_service.settings, "BREVO_API_KEY", "clave")
    send_test = AsyncMock(return_value={})
    monkeypatch.setattr(email_service, "send_test_email", send_test)
    monkeypatch.setattr(google_sheets_service, "service", object())
    monkeypatch.setattr(google_sheets_service, "check_connection", AsyncMock(return_value=True))

    response = await client.post(
        "/api/v1/admin/test-integrations",
        params={"email": "prueba@example.com"},
        headers=admin_headers,
    )

    body = response.json()
    assert body["success"] is True
    assert {result["status"] for result in body["results"].values()} == {"success"}
    send_test.assert_awaited_once_with("prueba@example.com")


async def test_google_sheets_connection_check(client, admin_headers, monkeypatch):
    monkeypatch.setattr(google_sheets_service, "check_connection", AsyncMock(return_value=False))

    response = await client.get("/api/v1/admin/google-sheets/test", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["success"] is False


async def test_google_sheets_export_sends_every_order(client, admin_headers, monkeypatch):
    await client.post("/api/v1/orders", json=make_order_payload())
    await client.post("/api/v1/orders", json=make_order_payload(name="Bruno"))
    export = AsyncMock(return_value=True)
    monkeypatch.setattr(google_sheets_service, "export_orders", export)

    response = await client.post("/api/v1/admin/google-sheets/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["exportedCount"] == 2
    exported = export.await_args.args[0]
    assert {order["name"] for order in exported} == {"Ana", "Bruno"}


async def test_google_sheets_export_failure_returns_500(client, admin_headers, monkeypatch):
    monkeypatch.setattr(google_sheets_service, "export_orders", AsyncMock(return_value=False))

    response = await client.post("/api/v1/admin/google-sheets/export", headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["success"] is False


async def test_revoked_sheet_credentials_show_as_error(client, admin_headers, monkeypatch):
    api = MagicMock()
    api.spreadsheets.return_value.get.return_value.execute.side_effect = RefreshError("invalid_grant")
    monkeypatch.setattr(google_sheets_service, "service", api)

    tested = await client.get("/api/v1/admin/google-sheets/test", headers=admin_headers)
    report = await client.post("/api/v1/admin/test-integrations", headers=admin_headers)
    exported = await client.post("/api/v1/admin/google-sheets/export", headers=admin_headers)

    assert tested.status_code == 200
    assert tested.json()["success"] is False
    assert report.status_code == 200
    assert report.json()["results"]["googleSheets"]["status"] == "error"
    assert exported.status_code == 500
    assert exported.json()["success"] is False
