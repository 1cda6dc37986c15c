# backend/app/api/v1/endpoints/admin_orders.py
"""
Endpoints de administración de pedidos: listado, detalle, edición y borrado.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import order_crud
from app.schemas.order_schema import Order, OrderSummary, OrderUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("")
async def read_orders(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
):
    """Listado paginado, del pedido más reciente al más antiguo."""
    try:
        rows, total = await order_crud.get_orders(
            db, skip=skip, limit=limit, status=status_filter, search=search
        )
    except SQLAlchemyError as e:
        logger.error(f"Error al obtener los pedidos: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error al obtener los pedidos")

    data = [
        OrderSummary(
            **order.to_dict(include_products=False),
            products_count=products_count,
        )
        for order, products_count in rows
    ]
    return {"success": True, "data": data, "total": total, "skip": skip, "limit": limit}

@router.get("/{order_id}")
async def read_order(order_id: int, db: AsyncSession = Depends(deps.get_db)):
    """Detalle de un pedido con todos sus productos."""
    order = await order_crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido no encontrado")
    return {"success": True, "data": Order.model_validate(order)}

@router.put("/{order_id}")
async def update_order(
    order_id: int,
    order_in: OrderUpdate,
    db: AsyncSession = Depends(deps.get_db),
):
    """Cambia el estado y/o las notas. Cualquier estado puede fijarse en cualquier momento."""
    order = await order_crud.update_order(db, order_id, order_in)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido no encontrado")
    logger.info(f"Pedido {order_id} actualizado (estado={order.status})")
    return {
        "success": True,
        "message": "Pedido actualizado exitosamente",
        "data": Order.model_validate(order),
    }

@router.delete("/{order_id}")
async def delete_order(order_id: int, db: AsyncSession = Depends(deps.get_db)):
    """Elimina el pedido y, en cascada, sus productos."""
    order = await order_crud.delete_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido no encontrado")
    logger.info(f"Pedido {order_id} eliminado")
    return {"success": True, "message": "Pedido eliminado exitosamente"}
