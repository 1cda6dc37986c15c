"""
Configuración del formulario (form_config) y colores por plantilla (products_colors).
"""

from app.services import settings_service
from app.services.settings_service import (
    DEFAULT_FORM_CONFIG,
    DEFAULT_PRODUCTS_COLORS,
    merge_form_config,
    merge_products_colors,
)


def test_merge_form_config_without_stored_value_returns_defaults():
    merged = merge_form_config(None)

    assert merged == DEFAULT_FORM_CONFIG
    # La copia no comparte diccionarios con los valores por defecto
    merged["orderFields"]["phone"] = False
    assert DEFAULT_FORM_CONFIG["orderFields"]["phone"] is True


def test_merge_form_config_overlays_each_section():
    stored = {
        "productFields": {"template_color": False},
        "orderLabels": {"notes": "Comentarios"},
    }

    merged = merge_form_config(stored)

    assert merged["productFields"]["template_color"] is False
    # Claves no guardadas conservan el valor por defecto
    assert merged["productFields"]["template_size"] is True
    assert merged["orderLabels"] == {"phone": "Teléfono", "notes": "Comentarios"}
    assert merged["orderFields"] == DEFAULT_FORM_CONFIG["orderFields"]


def test_merge_products_colors_fills_empty_and_missing_types():
    stored = {
        "Clásico": ["Negro"],
        "Sport": [],
        "Nueva Línea": ["Verde"],
    }

    merged = merge_products_colors(stored)

    assert merged["Clásico"] == ["Negro"]
    assert merged["Sport"] == DEFAULT_PRODUCTS_COLORS["Sport"]
    assert merged["Every Day"] == ["Habano", "Plastazote Crema"]
    # Solo se devuelven los tipos por defecto
    assert "Nueva Línea" not in merged
    assert set(merged) == set(DEFAULT_PRODUCTS_COLORS)
    assert merged["Sandalia Under Feet"] == []


async def test_save_replaces_whole_value(db):
    await settings_service.save_form_config(db, {"orderFields": {"phone": False, "notes": False}})
    await settings_service.save_form_config(db, {"orderLabels": {"phone": "Celular"}})

    merged = await settings_service.get_form_config(db)

    # El segundo guardado reemplaza al primero: orderFields vuelve a los valores por defecto
    assert merged["orderFields"] == {"phone": True, "notes": True}
    assert merged["orderLabels"]["phone"] == "Celular"


async def test_stored_products_colors_is_empty_when_absent(db):
    assert await settings_service.get_stored_products_colors(db) == {}


async def test_public_form_config_reflects_admin_changes(client, admin_headers):
    saved = await client.post(
        "/api/v1/admin/form-config",
        json={"productFields": {"midfoot_arch": False}},
        headers=admin_headers,
    )
    assert saved.status_code == 200
    assert saved.json() == {"success": True, "message": "Configuración guardada"}

    public = (await client.get("/api/v1/form-config")).json()["data"]
    assert public["productFields"]["midfoot_arch"] is False
    assert public["productFields"]["posterior_wedge"] is True

    admin = (await client.get("/api/v1/admin/form-config", headers=admin_headers)).json()["data"]
    assert admin == public


async def test_products_colors_admin_and_public_views(client, admin_headers):
    await client.post(
        "/api/v1/admin/products-colors",
        json={"Junior": ["Rosa"], "3D": []},
        headers=admin_headers,
    )

    stored = (await client.get("/api/v1/admin/products-colors", headers=admin_headers)).json()["data"]
    public = (await client.get("/api/v1/products-colors")).json()["data"]

    assert stored == {"Junior": ["Rosa"], "3D": []}
    assert public["Junior"] == ["Rosa"]
    assert public["3D"] == DEFAULT_PRODUCTS_COLORS["3D"]
    assert set(DEFAULT_PRODUCTS_COLORS) <= set(public)


async def test_settings_writes_require_admin(client):
    response = await client.post("/api/v1/admin/products-colors", json={"Junior": ["Rosa"]})

    assert response.status_code == 401


async def test_products_colors_rejects_non_list_values(client, admin_headers):
    response = await client.post(
        "/api/v1/admin/products-colors", json={"Junior": "Rosa"}, headers=admin_headers
    )

    assert response.status_code == 422
