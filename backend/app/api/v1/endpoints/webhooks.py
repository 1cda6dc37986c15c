# backend/app/api/v1/endpoints/webhooks.py
"""
Webhook invocado por la base de datos cuando se inserta un pedido.

Es una segunda vía hacia la misma hoja de cálculo que ya se actualiza al
enviar el formulario; no se deduplica, así que el pedido puede aparecer dos veces.
"""

import hmac
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.config import settings
from app.crud import order_crud
from app.services import notification_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _verify_secret(provided: Optional[str]) -> bool:
    expected = settings.WEBHOOK_SECRET
    if not expected:
        logger.warning("WEBHOOK_SECRET no configurado; rechazando por seguridad")
        return False
    return bool(provided) and hmac.compare_digest(provided, expected)


@router.post("/order-created")
async def order_created_webhook(
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
):
    """
    Recibe {record: {id}} o {id}, busca el pedido completo y lo añade a la hoja.
    """
    provided = request.headers.get("x-webhook-secret") or request.headers.get("x-supabase-signature")
    if not _verify_secret(provided):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No autorizado")

    try:
        payload = json.loads(await request.body() or b"{}")
    except json.JSONDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payload inválido")

    record = payload.get("record") if isinstance(payload, dict) else None
    order_id = (record or {}).get("id") if isinstance(record, dict) else None
    if order_id is None and isinstance(payload, dict):
        order_id = payload.get("id")
    try:
        order_id = int(order_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payload inválido: falta id")

    order = await order_crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No se encontró el pedido")

    order_data = notification_service.order_data_from_model(order)
    try:
        await notification_service.sync_order_to_sheet(order_data)
    except Exception as e:
        logger.error(f"Webhook: fallo al sincronizar el pedido {order_id} con Google Sheets: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al sincronizar con Google Sheets",
        )

    return {"success": True, "message": "Pedido enviado a Google Sheets"}
