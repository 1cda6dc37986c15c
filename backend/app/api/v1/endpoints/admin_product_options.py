# backend/app/api/v1/endpoints/admin_product_options.py
"""
Endpoints de administración de las opciones de producto.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import product_option_crud
from app.schemas.product_option_schema import (
    ProductOptionCreate,
    ProductOptionUpdate,
    ProductOptionResponse,
)

router = APIRouter()

@router.get("")
async def read_product_options(
    category: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
):
    """Todas las opciones (activas e inactivas), opcionalmente de una categoría."""
    options = await product_option_crud.get_product_options(db, category=category)
    return {"success": True, "data": [ProductOptionResponse.model_validate(o) for o in options]}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product_option(
    option_in: ProductOptionCreate,
    db: AsyncSession = Depends(deps.get_db),
):
    option = await product_option_crud.create_product_option(db, option_in)
    return {
        "success": True,
        "message": "Opción de producto creada exitosamente",
        "data": ProductOptionResponse.model_validate(option),
    }

@router.put("/{option_id}")
async def update_product_option(
    option_id: int,
    option_in: ProductOptionUpdate,
    db: AsyncSession = Depends(deps.get_db),
):
    option = await product_option_crud.update_product_option(db, option_id, option_in)
    if not option:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opción de producto no encontrada")
    return {
        "success": True,
        "message": "Opción de producto actualizada exitosamente",
        "data": ProductOptionResponse.model_validate(option),
    }

@router.delete("/{option_id}")
async def delete_product_option(option_id: int, db: AsyncSession = Depends(deps.get_db)):
    option = await product_option_crud.delete_product_option(db, option_id)
    if not option:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opción de producto no encontrada")
    return {"success": True, "message": "Opción de producto eliminada exitosamente"}
