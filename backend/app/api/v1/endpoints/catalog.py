# backend/app/api/v1/endpoints/catalog.py
"""
Endpoints públicos de lectura que alimentan el formulario:
opciones de producto activas, configuración de campos y colores por plantilla.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import product_option_crud
from app.schemas.product_option_schema import ProductOptionResponse
from app.services import settings_service

router = APIRouter()

@router.get("/product-options")
async def read_active_product_options(db: AsyncSession = Depends(deps.get_db)):
    """Opciones activas ordenadas por categoría y order_index."""
    options = await product_option_crud.get_product_options(db, active_only=True)
    return {
        "success": True,
        "data": [ProductOptionResponse.model_validate(option) for option in options],
    }

@router.get("/form-config")
async def read_form_config(db: AsyncSession = Depends(deps.get_db)):
    """Configuración del formulario, completada con los valores por defecto."""
    return {"success": True, "data": await settings_service.get_form_config(db)}

@router.get("/products-colors")
async def read_products_colors(db: AsyncSession = Depends(deps.get_db)):
    """Colores por tipo de plantilla, completados con los valores por defecto."""
    return {"success": True, "data": await settings_service.get_products_colors(db)}
