# backend/app/services/notification_service.py
"""
Servicio de notificaciones posteriores a la creación de un pedido.

Una vez guardado el pedido se lanzan a la vez tres tareas independientes:
- correo de confirmación al cliente
- correo de aviso al administrador
- alta de las filas del pedido en Google Sheets

Se espera a que las tres terminen (bien o mal) antes de responder, pero un
fallo en cualquiera solo se registra en el log: el pedido ya está guardado y
el cliente recibe una respuesta correcta. No hay reintentos ni cancelación.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.crud.order_crud import CreatedOrder
from app.db.models.customer_request_model import CustomerRequest
from app.db.models.product_request_model import PRODUCT_FIELDS
from app.schemas.order_schema import OrderCreate
from app.services import email_service
from app.services.google_sheets_service import google_sheets_service

logger = logging.getLogger(__name__)


@dataclass
class BranchOutcome:
    """Resultado de una rama de la notificación."""
    name: str
    ok: bool
    error: Optional[str] = None


@dataclass
class FanOutResult:
    order_id: Any
    outcomes: List[BranchOutcome] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    def failed(self) -> List[str]:
        return [outcome.name for outcome in self.outcomes if not outcome.ok]

# ========================================
# DATOS DEL PEDIDO PARA LAS NOTIFICACIONES
# ========================================

def order_data_from_submission(created: CreatedOrder, order_in: OrderCreate) -> Dict[str, Any]:
    """
    Datos del pedido a partir de lo enviado en el formulario.

    Las notas solo se incluyen si llegaron a guardarse.
    """
    return {
        "id": created.id,
        "name": order_in.name,
        "lastname": order_in.lastname,
        "email": order_in.email,
        "phone": order_in.phone or "",
        "status": "pending",
        "notes": order_in.notes if created.notes_saved else "",
        "created_at": created.created_at or datetime.now(timezone.utc),
        "products": [product.model_dump() for product in order_in.products],
    }


def order_data_from_model(order: CustomerRequest) -> Dict[str, Any]:
    """Datos del pedido a partir de un CustomerRequest con sus productos cargados."""
    return {
        "id": order.id,
        "name": order.name or "",
        "lastname": order.lastname or "",
        "email": order.email or "",
        "phone": order.phone or "",
        "status": order.status or "",
        "notes": order.notes or "",
        "created_at": order.created_at,
        "products": [
            {field_name: getattr(product, field_name) or "" for field_name in PRODUCT_FIELDS}
            for product in order.products
        ],
    }

# ========================================
# RAMAS
# ========================================

async def sync_order_to_sheet(order_data: Dict[str, Any]) -> Dict[str, Any]:
    """Añade el pedido a la hoja; lanza excepción si la API no lo aceptó."""
    result = await google_sheets_service.append_order(order_data)
    if not result.get("success"):
        raise RuntimeError(result.get("error") or "Error al sincronizar con Google Sheets")
    return result


async def _run_branch(name: str, operation: Callable[[Dict[str, Any]], Awaitable[Any]], order_data: Dict[str, Any]) -> BranchOutcome:
    try:
        await operation(order_data)
    except Exception as e:
        logger.error(f"Fallo en '{name}' para el pedido {order_data.get('id')}: {e}", exc_info=True)
        return BranchOutcome(name=name, ok=False, error=str(e))
    return BranchOutcome(name=name, ok=True)


async def dispatch_order_notifications(order_data: Dict[str, Any]) -> FanOutResult:
    """
    Lanza las tres notificaciones en paralelo y espera a todas.

    Nunca lanza excepción; el resultado de cada rama queda en FanOutResult.
    """
    branches = [
        ("customer_email", email_service.send_customer_confirmation_email),
        ("admin_email", email_service.send_admin_notification_email),
        ("google_sheets", sync_order_to_sheet),
    ]
    outcomes = await asyncio.gather(
        *(_run_branch(name, operation, order_data) for name, operation in branches)
    )
    result = FanOutResult(order_id=order_data.get("id"), outcomes=list(outcomes))
    if result.all_ok:
        logger.info(f"Notificaciones del pedido {result.order_id} completadas")
    else:
        logger.warning(f"Notificaciones del pedido {result.order_id} con fallos: {', '.join(result.failed())}")
    return result
