"""
Validación de pedidos y productos.
"""

import pytest
from pydantic import ValidationError

from app.schemas.order_schema import OrderCreate, OrderUpdate, ProductRequestCreate


def _product(**fields):
    data = {"patient_name": "Luis", "product_type": "Clásico"}
    data.update(fields)
    return ProductRequestCreate(**data)


def test_product_defaults():
    product = _product(template_color=None, posterior_wedge=None)

    assert product.template_color == ""
    assert product.posterior_wedge == "ninguna"
    assert product.patient_lastname == ""


def test_product_strips_whitespace():
    product = _product(patient_name="  Luis  ", template_size=" 38 ")

    assert product.patient_name == "Luis"
    assert product.template_size == "38"


@pytest.mark.parametrize("missing", ["patient_name", "product_type"])
def test_product_requires_patient_and_type(missing):
    with pytest.raises(ValidationError):
        _product(**{missing: "   "})


@pytest.mark.parametrize("parent, value, mm_field, kept", [
    ("anterior_wedge", "Cuña Anterior Interna", "anterior_wedge_mm", True),
    ("anterior_wedge", "Cuña Anterior Externa", "anterior_wedge_mm", False),
    ("anterior_wedge_left", "", "anterior_wedge_left_mm", False),
    ("rearfoot_calcaneus", "Realce en talón", "heel_raise_mm", True),
    ("rearfoot_calcaneus_left", "Talonera", "heel_raise_left_mm", False),
    ("posterior_wedge", "Cuña Posterior Externa", "posterior_wedge_mm", True),
    ("posterior_wedge", "ninguna", "posterior_wedge_mm", False),
    ("posterior_wedge_left", "Cuña Posterior Interna", "posterior_wedge_left_mm", True),
])
def test_mm_values_only_kept_when_parent_unlocks_them(parent, value, mm_field, kept):
    product = _product(**{parent: value, mm_field: "5"})

    assert getattr(product, mm_field) == ("5" if kept else "")


def test_order_requires_names_and_products():
    with pytest.raises(ValidationError) as exc_info:
        OrderCreate(name="A", lastname=" ", email="ana@example.com", products=[])

    fields = {error["loc"][0] for error in exc_info.value.errors()}
    assert fields == {"name", "lastname", "products"}


def test_order_normalizes_optional_fields():
    order = OrderCreate(
        name=" Ana ",
        lastname="Pérez",
        email="ana@example.com",
        phone="   ",
        notes=None,
        products=[{"patient_name": "Luis", "product_type": "Sport"}],
    )

    assert order.name == "Ana"
    assert order.phone is None
    assert order.notes == ""


def test_order_update_accepts_only_known_statuses():
    assert OrderUpdate(status="processing").status.value == "processing"
    with pytest.raises(ValidationError):
        OrderUpdate(status="shipped")
