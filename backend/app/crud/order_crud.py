# backend/app/crud/order_crud.py
"""
Operaciones CRUD para los pedidos (CustomerRequest) y sus productos (ProductRequest).

La creación inserta primero el pedido y luego sus productos, cada paso con su
propio commit. No hay una transacción que los englobe: si fallan los productos,
el pedido ya confirmado queda sin productos.

Los despliegues no siempre tienen el mismo esquema, por eso la creación tolera
dos variantes antiguas:
- customer_requests sin la columna notes: se reintenta sin ella.
- product_requests con solo las columnas mínimas: se reintenta con
  product_type y posterior_wedge.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select, insert, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.customer_request_model import CustomerRequest
from app.db.models.product_request_model import ProductRequest, LEGACY_PRODUCT_FIELDS
from app.schemas.order_schema import OrderCreate, OrderUpdate, NO_POSTERIOR_WEDGE

logger = logging.getLogger(__name__)


class OrderCreationError(Exception):
    """No se pudo guardar el pedido ni siquiera con las variantes de esquema antiguas."""


@dataclass
class CreatedOrder:
    """Resultado de create_order: lo mínimo para responder y notificar."""
    id: int
    created_at: Optional[datetime]
    notes_saved: bool


# ========================================
# CREACIÓN
# ========================================

async def _insert_customer_request(db: AsyncSession, values: dict) -> Tuple[int, Optional[datetime]]:
    table = CustomerRequest.__table__
    stmt = insert(table).values(**values).returning(table.c.id, table.c.created_at)
    result = await db.execute(stmt)
    row = result.one()
    await db.commit()
    return row.id, row.created_at


async def _insert_product_requests(db: AsyncSession, rows: List[dict]) -> None:
    await db.execute(insert(ProductRequest.__table__), rows)
    await db.commit()


def _legacy_product_row(order_id: int, product: dict) -> dict:
    row = {field: product.get(field) for field in LEGACY_PRODUCT_FIELDS}
    row["posterior_wedge"] = row["posterior_wedge"] or NO_POSTERIOR_WEDGE
    return {"customer_request_id": order_id, **row}


async def create_order(db: AsyncSession, order: OrderCreate) -> CreatedOrder:
    """
    Crea un pedido y sus productos de forma asíncrona.

    Si la inserción con notes falla se repite sin esa columna; las notas
    recogidas se pierden en ese caso. Si la inserción completa de productos
    falla se repite con el subconjunto mínimo de columnas.
    """
    customer_values = {
        "name": order.name,
        "lastname": order.lastname,
        "email": order.email,
        "phone": order.phone,
        "status": "pending",
    }

    notes_saved = True
    try:
        order_id, created_at = await _insert_customer_request(
            db, {**customer_values, "notes": order.notes or None}
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(f"Inserción del pedido con notes falló, reintentando sin notes: {e}")
        notes_saved = False
        try:
            order_id, created_at = await _insert_customer_request(db, customer_values)
        except SQLAlchemyError as retry_error:
            await db.rollback()
            logger.error(f"Error al crear el pedido: {retry_error}", exc_info=True)
            raise OrderCreationError("Error al crear el pedido") from retry_error

    products = [product.model_dump() for product in order.products]

    try:
        await _insert_product_requests(
            db, [{"customer_request_id": order_id, **product} for product in products]
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(f"Inserción completa de productos falló para el pedido {order_id}, usando columnas mínimas: {e}")
        try:
            await _insert_product_requests(
                db, [_legacy_product_row(order_id, product) for product in products]
            )
        except SQLAlchemyError as retry_error:
            await db.rollback()
            # El pedido ya está confirmado y queda sin productos
            logger.error(
                f"Error al crear los productos del pedido {order_id}; el pedido queda sin productos: {retry_error}",
                exc_info=True,
            )
            raise OrderCreationError("Error al crear el pedido") from retry_error

    logger.info(f"Pedido {order_id} creado con {len(products)} producto(s)")
    return CreatedOrder(
        id=order_id,
        created_at=created_at,
        notes_saved=notes_saved,
    )


# ========================================
# LECTURA
# ========================================

async def get_order(db: AsyncSession, order_id: int) -> Optional[CustomerRequest]:
    """
    Obtiene un pedido con sus productos de forma asíncrona.
    """
    query = (
        select(CustomerRequest)
        .options(selectinload(CustomerRequest.products))
        .filter(CustomerRequest.id == order_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalars().first()


async def get_orders(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Tuple[CustomerRequest, int]], int]:
    """
    Listado paginado para el panel, del más reciente al más antiguo.

    Devuelve (filas, total) donde cada fila es (pedido, cantidad de productos).
    """
    filters = []
    if status and status != "all":
        filters.append(CustomerRequest.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(or_(
            CustomerRequest.name.ilike(pattern),
            CustomerRequest.lastname.ilike(pattern),
            CustomerRequest.email.ilike(pattern),
        ))

    total_query = select(func.count()).select_from(CustomerRequest).filter(*filters)
    total = (await db.execute(total_query)).scalar() or 0

    query = (
        select(CustomerRequest, func.count(ProductRequest.id))
        .outerjoin(ProductRequest, ProductRequest.customer_request_id == CustomerRequest.id)
        .filter(*filters)
        .group_by(CustomerRequest.id)
        .order_by(CustomerRequest.created_at.desc(), CustomerRequest.id.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return [(row[0], row[1]) for row in result.all()], total


async def get_orders_for_export(
    db: AsyncSession,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    status: Optional[str] = None,
) -> List[CustomerRequest]:
    """
    Pedidos con sus productos para exportar, filtrados por rango de fechas y estado.
    """
    query = select(CustomerRequest).options(selectinload(CustomerRequest.products))
    if date_from:
        query = query.filter(CustomerRequest.created_at >= date_from)
    if date_to:
        query = query.filter(CustomerRequest.created_at <= date_to)
    if status and status != "all":
        query = query.filter(CustomerRequest.status == status)
    query = query.order_by(CustomerRequest.created_at.desc(), CustomerRequest.id.desc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_order_stat_rows(db: AsyncSession) -> List[Tuple[str, Optional[datetime]]]:
    """Pares (estado, fecha de creación) de todos los pedidos."""
    result = await db.execute(select(CustomerRequest.status, CustomerRequest.created_at))
    return [(row[0], row[1]) for row in result.all()]


async def get_product_types(db: AsyncSession) -> List[str]:
    """Tipo de plantilla de cada producto solicitado."""
    table = ProductRequest.__table__
    result = await db.execute(select(table.c.product_type))
    return result.scalars().all()


# ========================================
# ACTUALIZACIÓN Y BORRADO
# ========================================

async def update_order(db: AsyncSession, order_id: int, order_in: OrderUpdate) -> Optional[CustomerRequest]:
    """
    Actualiza estado y/o notas de un pedido de forma asíncrona.

    Cualquier estado puede pasar a cualquier otro.
    """
    db_order = await get_order(db, order_id)
    if not db_order:
        return None

    changes = order_in.model_dump(exclude_unset=True)
    if changes.get("status") is not None:
        db_order.status = order_in.status.value
    # Un null explícito borra las notas
    if "notes" in changes:
        db_order.notes = changes["notes"]
    db_order.updated_at = func.now()

    await db.commit()
    return await get_order(db, order_id)


async def delete_order(db: AsyncSession, order_id: int) -> Optional[CustomerRequest]:
    """
    Elimina un pedido; sus productos se eliminan en cascada.
    """
    db_order = await get_order(db, order_id)
    if not db_order:
        return None
    await db.delete(db_order)
    await db.commit()
    return db_order
