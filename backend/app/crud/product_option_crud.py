# backend/app/crud/product_option_crud.py
"""
Operaciones CRUD para las opciones de producto.

Las opciones se ordenan siempre por categoría y luego por order_index, que es
el orden en que el formulario las presenta.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.product_option_model import ProductOption
from app.schemas.product_option_schema import ProductOptionCreate, ProductOptionUpdate

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product_option(db: AsyncSession, option_id: int) -> Optional[ProductOption]:
    result = await db.execute(select(ProductOption).filter(ProductOption.id == option_id))
    return result.scalars().first()


async def get_product_options(
    db: AsyncSession,
    category: Optional[str] = None,
    active_only: bool = False,
) -> List[ProductOption]:
    """
    Obtiene las opciones de producto, opcionalmente filtradas.

    Args:
        db: Sesión asíncrona de SQLAlchemy
        category: Solo opciones de esta categoría
        active_only: Solo opciones visibles en el formulario público

    Returns:
        Lista de ProductOption ordenada por categoría y order_index
    """
    query = select(ProductOption)
    if category:
        query = query.filter(ProductOption.category == category)
    if active_only:
        query = query.filter(ProductOption.is_active.is_(True))
    query = query.order_by(ProductOption.category, ProductOption.order_index, ProductOption.id)
    result = await db.execute(query)
    return result.scalars().all()

# ========================================
# OPERACIONES DE ESCRITURA
# ========================================

async def create_product_option(db: AsyncSession, option_in: ProductOptionCreate) -> ProductOption:
    db_option = ProductOption(**option_in.model_dump())
    db.add(db_option)
    await db.commit()
    await db.refresh(db_option)
    return db_option


async def update_product_option(
    db: AsyncSession, option_id: int, option_in: ProductOptionUpdate
) -> Optional[ProductOption]:
    """Actualización parcial: solo se tocan los campos enviados."""
    db_option = await get_product_option(db, option_id)
    if not db_option:
        return None
    for field, value in option_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(db_option, field, value)
    await db.commit()
    await db.refresh(db_option)
    return db_option


async def delete_product_option(db: AsyncSession, option_id: int) -> Optional[ProductOption]:
    db_option = await get_product_option(db, option_id)
    if not db_option:
        return None
    await db.delete(db_option)
    await db.commit()
    return db_option
