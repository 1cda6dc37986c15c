# backend/app/services/report_service.py
"""
Estadísticas y exportaciones del panel de administración.

Las estadísticas se calculan en Python sobre filas ya leídas de la base de
datos; no hay agregación en SQL.
"""

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.core.timezone import to_local_time
from app.db.models.customer_request_model import ORDER_STATUSES, CustomerRequest

RECENT_DAYS = 7
DAILY_WINDOW_DAYS = 30

CSV_HEADERS = [
    "ID",
    "Nombre",
    "Apellido",
    "Email",
    "Teléfono",
    "Estado",
    "Fecha Creación",
    "Productos",
    "Notas",
]


def _as_utc(value: datetime) -> datetime:
    # SQLite devuelve fechas sin zona; se interpretan como UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_order_stats(
    order_rows: Iterable[Tuple[str, Optional[datetime]]],
    product_types: Iterable[Optional[str]],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Agrega pedidos por estado, por día y productos por tipo.

    Args:
        order_rows: pares (estado, fecha de creación) de cada pedido
        product_types: tipo de plantilla de cada producto solicitado
        now: instante de referencia para las ventanas de 7 y 30 días

    Returns:
        Diccionario con totalOrders, recentOrders, statusCounts (los cuatro
        estados siempre presentes), ordersByDay y productTypeCounts
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    recent_since = now - timedelta(days=RECENT_DAYS)
    daily_since = now - timedelta(days=DAILY_WINDOW_DAYS)

    order_rows = list(order_rows)
    status_counter = Counter(status for status, _ in order_rows)

    recent_orders = 0
    orders_by_day: Dict[str, int] = {}
    for _, created_at in sorted(
        ((s, _as_utc(c)) for s, c in order_rows if c is not None),
        key=lambda row: row[1],
    ):
        if created_at >= recent_since:
            recent_orders += 1
        if created_at >= daily_since:
            day = created_at.strftime("%Y-%m-%d")
            orders_by_day[day] = orders_by_day.get(day, 0) + 1

    status_counts = {status: status_counter.get(status, 0) for status in ORDER_STATUSES}
    # Estados fuera de la lista también se informan
    for status, count in status_counter.items():
        if status not in status_counts:
            status_counts[status] = count

    return {
        "totalOrders": len(order_rows),
        "recentOrders": recent_orders,
        "statusCounts": status_counts,
        "ordersByDay": orders_by_day,
        "productTypeCounts": dict(Counter(t for t in product_types if t)),
    }


def _csv_field(value: Any) -> str:
    # Solo se envuelve entre comillas; las comillas internas no se escapan
    return f'"{value}"'


def build_orders_csv(orders: List[CustomerRequest]) -> str:
    """
    CSV de pedidos: una fila por pedido con la cantidad de productos.

    Sin pedidos devuelve solo la línea de encabezados.
    """
    lines = [",".join(CSV_HEADERS)]
    for order in orders:
        created = to_local_time(order.created_at).strftime("%d/%m/%Y") if order.created_at else ""
        row = [
            order.id,
            order.name,
            order.lastname,
            order.email,
            order.phone or "",
            order.status,
            created,
            len(order.products),
            order.notes or "",
        ]
        lines.append(",".join(_csv_field(value) for value in row))
    return "\n".join(lines)


def export_filename(today: Optional[datetime] = None) -> str:
    today = today or datetime.now()
    return f"pedidos_{today.strftime('%Y-%m-%d')}.csv"
