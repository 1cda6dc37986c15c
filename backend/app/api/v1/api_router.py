# backend/app/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar las rutas públicas (formulario, catálogo, salud y
webhooks) y las del panel de administración, que exigen sesión de administrador.
"""

from fastapi import APIRouter, Depends

from app.api import deps
from app.api.v1.endpoints import (
    orders,
    catalog,
    health,
    webhooks,
    admin_orders,
    admin_product_options,
    admin_settings,
    admin_reports,
    admin_integrations,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

api_router_v1 = APIRouter()

# ========================================
# RUTAS PÚBLICAS
# ========================================

# Envío del formulario de pedidos
api_router_v1.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"]
)

# Opciones y configuración que consume el formulario
api_router_v1.include_router(
    catalog.router,
    tags=["Catalog"]
)

api_router_v1.include_router(
    health.router,
    prefix="/health",
    tags=["Health"]
)

api_router_v1.include_router(
    webhooks.router,
    prefix="/webhooks",
    tags=["Webhooks"]
)

# ========================================
# RUTAS DE ADMINISTRACIÓN
# ========================================

admin_router = APIRouter(dependencies=[Depends(deps.require_admin)])

admin_router.include_router(
    admin_orders.router,
    prefix="/orders",
    tags=["Admin - Orders"]
)

admin_router.include_router(
    admin_product_options.router,
    prefix="/product-options",
    tags=["Admin - Product Options"]
)

admin_router.include_router(
    admin_settings.router,
    tags=["Admin - Settings"]
)

admin_router.include_router(
    admin_reports.router,
    tags=["Admin - Reports"]
)

admin_router.include_router(
    admin_integrations.router,
    tags=["Admin - Integrations"]
)

api_router_v1.include_router(admin_router, prefix="/admin")
