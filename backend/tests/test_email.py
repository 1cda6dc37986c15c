"""
Plantillas de correo y envío a través de la API de Brevo.
"""

import json
from datetime import datetime

import httpx
import pytest

from app.services import email_service

ORDER_DATA = {
    "id": 12,
    "name": "Ana",
    "lastname": "Pérez",
    "email": "ana@example.com",
    "phone": "",
    "notes": "<b>Urgente</b>",
    "created_at": datetime(2024, 3, 5, 9, 7),
    "products": [
        {
            "patient_name": "Luis",
            "patient_lastname": "Gómez",
            "product_type": "Clásico",
            "template_color": "Habano",
            "anterior_wedge": "",
        }
    ],
}


def test_customer_email_lists_products_and_escapes_values():
    content = email_service.generate_customer_email_html(ORDER_DATA)

    assert "#12" in content
    # La fecha se guarda en UTC y se muestra en hora de Buenos Aires
    assert "5 de marzo de 2024, 06:07" in content
    assert "Producto 1: Clásico" in content
    assert "Luis Gómez" in content
    assert "<strong>Color:</strong> Habano" in content
    # Los campos vacíos se muestran con un guion largo
    assert "<strong>Cuña Anterior (Pie Derecho):</strong> —" in content
    assert "&lt;b&gt;Urgente&lt;/b&gt;" in content
    assert "<b>Urgente</b>" not in content


def test_admin_email_links_to_panel(monkeypatch):
    monkeypatch.setattr(email_service.settings, "APP_URL", "https://pedidos.example.com")

    content = email_service.generate_admin_email_html(ORDER_DATA)

    assert "https://pedidos.example.com/admin/orders/12" in content
    assert "<strong>Teléfono:</strong> —" in content


async def test_send_without_api_key_raises(monkeypatch):
    monkeypatch.setattr(email_service.settings, "BREVO_API_KEY", None)

    assert email_service.is_configured() is False
    with pytest.raises(email_service.EmailConfigurationError):
        await email_service.send_customer_confirmation_email(ORDER_DATA)


def _patch_transport(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(email_service.httpx, "AsyncClient", client_factory)


async def test_send_posts_brevo_payload(monkeypatch):
    monkeypatch.setattr(email_service.settings, "BREVO_API_KEY", "clave")
    monkeypatch.setattr(email_service.settings, "ADMIN_EMAIL", "admin@example.com")
    captured = {}

    def handler(request):
        captured["headers"] = request.headers
        captured["json"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "abc"})

    _patch_transport(monkeypatch, handler)

    result = await email_service.send_admin_notification_email(ORDER_DATA)

    assert result == {"messageId": "abc"}
    assert captured["headers"]["api-key"] == "clave"
    assert captured["json"]["to"] == [{"email": "admin@example.com"}]
    assert captured["json"]["subject"] == "Nuevo pedido recibido #12"


async def test_send_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(email_service.settings, "BREVO_API_KEY", "clave")
    _patch_transport(monkeypatch, lambda request: httpx.Response(401, json={"message": "Key not found"}))

    with pytest.raises(httpx.HTTPStatusError):
        await email_service.send_customer_confirmation_email(ORDER_DATA)


async def test_send_accepts_success_without_json_body(monkeypatch):
    monkeypatch.setattr(email_service.settings, "BREVO_API_KEY", "clave")
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, text="OK"))

    assert await email_service.send_test_email("prueba@example.com") == {}
