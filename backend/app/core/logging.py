# backend/app/core/logging.py
"""
Configuración del logging de la aplicación.

Cada módulo obtiene su propio logger con logging.getLogger(__name__);
aquí solo se fija el nivel y el formato a partir de settings.
"""

import logging

from app.core.config import settings


def setup_logging() -> None:
    """Aplica LOG_LEVEL y LOG_FORMAT al logger raíz."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=settings.LOG_FORMAT)

    # httpx registra cada petición en INFO; demasiado ruido para el envío de emails
    logging.getLogger("httpx").setLevel(logging.WARNING)
    # El cliente de Google avisa en cada build() sobre la caché de discovery
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
