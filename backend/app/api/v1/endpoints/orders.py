# backend/app/api/v1/endpoints/orders.py
"""
Endpoint público de envío de pedidos.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import order_crud
from app.crud.order_crud import OrderCreationError
from app.schemas.order_schema import OrderCreate, OrderCreated
from app.services import notification_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=OrderCreated)
async def submit_order(
    order_in: OrderCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> OrderCreated:
    """
    Recibe el formulario público y crea el pedido.

    1. El cuerpo ya llega validado; un error de validación no escribe nada.
    2. Se guardan el pedido y sus productos.
    3. Se envían los correos y se sincroniza la hoja de cálculo en paralelo.
       Sus fallos no cambian la respuesta: el pedido ya existe.
    """
    try:
        created = await order_crud.create_order(db, order_in)
    except OrderCreationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    order_data = notification_service.order_data_from_submission(created, order_in)
    await notification_service.dispatch_order_notifications(order_data)

    return OrderCreated(orderId=created.id)
