# backend/app/services/settings_service.py
"""
Servicio de configuración compartida del formulario.

La configuración vive en la tabla app_settings y se vuelve a leer en cada
petición; no se guarda en memoria del proceso para que todas las instancias
vean el mismo valor.

Dos claves:
- form_config: qué campos opcionales muestra el formulario y sus etiquetas.
- products_colors: colores permitidos por tipo de plantilla.
"""

import copy
import logging
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import setting_crud

logger = logging.getLogger(__name__)

FORM_CONFIG_KEY = "form_config"
PRODUCTS_COLORS_KEY = "products_colors"

# ========================================
# VALORES POR DEFECTO
# ========================================

DEFAULT_FORM_CONFIG: Dict[str, Dict[str, Any]] = {
    "orderFields": {"phone": True, "notes": True},
    "orderLabels": {"phone": "Teléfono", "notes": "Observaciones"},
    "productFields": {
        "forefoot_metatarsal": True,
        "anterior_wedge": True,
        "midfoot_arch": True,
        "midfoot_external_wedge": True,
        "rearfoot_calcaneus": True,
        "heel_raise_mm": True,
        "posterior_wedge": True,
        "template_color": True,
        "template_size": True,
    },
    "productLabels": {
        "template_color": "Color",
        "template_size": "Selección de talle",
        "forefoot_metatarsal": "Antepié - Zona metatarsal",
        "anterior_wedge": "Cuña Anterior",
        "midfoot_arch": "Zona arco",
        "midfoot_external_wedge": "Cuña Mediopié Externa",
        "rearfoot_calcaneus": "Retropié - Zona calcáneo",
        "heel_raise_mm": "Detalle de milímetros para Realce en talón",
        "posterior_wedge": "Cuña Posterior",
    },
}

# Tipos de plantilla y sus colores; una lista vacía significa sin elección de color
DEFAULT_PRODUCTS_COLORS: Dict[str, List[str]] = {
    "Clásico": ["Habano", "Fucsia"],
    "Sport": ["Gris", "Azul", "Violeta", "Fucsia"],
    "Junior": ["Azul", "Fucsia"],
    "Cross Trainer": ["Gris", "Azul"],
    "Botín": ["Gris", "Azul", "Violeta", "Fucsia"],
    "Every Day": ["Habano", "Plastazote Crema"],
    "3/4": ["Habano", "Gris"],
    "Mi Marca Sport": ["Habano"],
    "Mi Marca Clásica": ["Habano"],
    "3D": ["Rojo", "Azul", "Menta", "Lavanda"],
    "Sandalia Under Feet": [],
    "Plantilla 3D": [],
}

# ========================================
# FUSIÓN CON LOS VALORES POR DEFECTO
# ========================================

def merge_form_config(stored: Any) -> Dict[str, Any]:
    """
    Superpone la configuración guardada a la de por defecto, sección por sección.

    Una clave que falta en lo guardado (p.ej. un campo añadido después)
    conserva su valor por defecto, normalmente visible.
    """
    merged = copy.deepcopy(DEFAULT_FORM_CONFIG)
    if not isinstance(stored, dict):
        return merged
    for section, value in stored.items():
        if section in merged and isinstance(value, dict):
            merged[section].update(value)
        else:
            merged[section] = value
    return merged


def merge_products_colors(stored: Any) -> Dict[str, List[str]]:
    """
    Completa el mapeo guardado con los colores por defecto.

    Para cada tipo por defecto se usa la lista guardada si no está vacía.
    Solo se devuelven los tipos por defecto; los demás tipos guardados se ignoran.
    """
    stored = stored if isinstance(stored, dict) else {}
    merged: Dict[str, List[str]] = {}
    for product_type, default_colors in DEFAULT_PRODUCTS_COLORS.items():
        existing = stored.get(product_type)
        merged[product_type] = list(existing) if isinstance(existing, list) and existing else list(default_colors)
    return merged

# ========================================
# LECTURA Y ESCRITURA
# ========================================

async def get_form_config(db: AsyncSession) -> Dict[str, Any]:
    stored = await setting_crud.get_setting_value(db, FORM_CONFIG_KEY)
    return merge_form_config(stored)


async def save_form_config(db: AsyncSession, value: Dict[str, Any]) -> None:
    """Reemplaza form_config entero."""
    await setting_crud.upsert_setting(db, FORM_CONFIG_KEY, value)
    logger.info("form_config actualizado")


async def get_products_colors(db: AsyncSession) -> Dict[str, List[str]]:
    stored = await setting_crud.get_setting_value(db, PRODUCTS_COLORS_KEY)
    return merge_products_colors(stored)


async def get_stored_products_colors(db: AsyncSession) -> Dict[str, List[str]]:
    """El mapeo tal como está guardado, sin completar; {} si no existe."""
    stored = await setting_crud.get_setting_value(db, PRODUCTS_COLORS_KEY)
    return stored if isinstance(stored, dict) else {}


async def save_products_colors(db: AsyncSession, value: Dict[str, List[str]]) -> None:
    await setting_crud.upsert_setting(db, PRODUCTS_COLORS_KEY, value)
    logger.info("products_colors actualizado")
