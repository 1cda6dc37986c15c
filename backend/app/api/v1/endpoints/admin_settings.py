# backend/app/api/v1/endpoints/admin_settings.py
"""
Endpoints de administración de la configuración compartida:
form_config y products_colors. Las escrituras reemplazan el valor entero.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.schemas.settings_schema import FormConfig, ProductsColors
from app.services import settings_service

router = APIRouter()

@router.get("/form-config")
async def read_form_config(db: AsyncSession = Depends(deps.get_db)):
    return {"success": True, "data": await settings_service.get_form_config(db)}

@router.post("/form-config")
async def save_form_config(config_in: FormConfig, db: AsyncSession = Depends(deps.get_db)):
    await settings_service.save_form_config(db, config_in.model_dump(exclude_unset=True))
    return {"success": True, "message": "Configuración guardada"}

@router.get("/products-colors")
async def read_products_colors(db: AsyncSession = Depends(deps.get_db)):
    """El mapeo guardado, sin completar con los valores por defecto."""
    return {"success": True, "data": await settings_service.get_stored_products_colors(db)}

@router.post("/products-colors")
async def save_products_colors(colors_in: ProductsColors, db: AsyncSession = Depends(deps.get_db)):
    await settings_service.save_products_colors(db, colors_in.root)
    return {"success": True, "message": "Configuración guardada"}
