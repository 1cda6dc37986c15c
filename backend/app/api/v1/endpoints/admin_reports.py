# backend/app/api/v1/endpoints/admin_reports.py
"""
Endpoints de informes: estadísticas y exportación de pedidos en CSV o JSON.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import order_crud
from app.schemas.order_schema import Order, OrderExportRequest
from app.services import report_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/stats")
async def read_stats(db: AsyncSession = Depends(deps.get_db)):
    """Totales por estado, pedidos por día (últimos 30) y productos por tipo."""
    try:
        order_rows = await order_crud.get_order_stat_rows(db)
        product_types = await order_crud.get_product_types(db)
    except SQLAlchemyError as e:
        logger.error(f"Error al calcular estadísticas: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error al obtener las estadísticas")
    return {"success": True, "data": report_service.compute_order_stats(order_rows, product_types)}

@router.post("/export")
async def export_orders(
    export_in: OrderExportRequest,
    db: AsyncSession = Depends(deps.get_db),
):
    """
    Exporta los pedidos filtrados por fechas y estado.

    format=csv devuelve un archivo; format=json devuelve los pedidos con sus productos.
    """
    try:
        orders = await order_crud.get_orders_for_export(
            db,
            date_from=export_in.dateFrom,
            date_to=export_in.dateTo,
            status=export_in.status,
        )
    except SQLAlchemyError as e:
        logger.error(f"Error al obtener los pedidos para exportar: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error al obtener los pedidos para exportar",
        )

    logger.info(f"Exportando {len(orders)} pedidos en formato {export_in.format}")
    if export_in.format == "csv":
        return Response(
            content=report_service.build_orders_csv(orders),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{report_service.export_filename()}"'},
        )

    return {
        "success": True,
        "data": [Order.model_validate(order) for order in orders],
        "exportedAt": datetime.now(timezone.utc).isoformat(),
    }
