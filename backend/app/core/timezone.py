# backend/app/core/timezone.py
"""
Conversión de fechas a la zona horaria de la aplicación.

La base de datos guarda las fechas en UTC; todo lo que se muestra a personas
(correos, hoja de cálculo, CSV) pasa por aquí.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from app.core.config import settings


def to_local_time(value: datetime) -> datetime:
    """Convierte a APP_TIMEZONE; una fecha sin zona se interpreta como UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(settings.APP_TIMEZONE))
