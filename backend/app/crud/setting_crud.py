# backend/app/crud/setting_crud.py
"""
Operaciones sobre la tabla clave-valor app_settings.
"""

from typing import Any, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.app_setting_model import AppSetting


async def get_setting_value(db: AsyncSession, key: str) -> Optional[Any]:
    """Devuelve el valor guardado bajo `key`, o None si no existe la fila."""
    result = await db.execute(select(AppSetting.value).filter(AppSetting.key == key))
    return result.scalars().first()


async def upsert_setting(db: AsyncSession, key: str, value: Any) -> AppSetting:
    """
    Crea o reemplaza por completo el valor de `key`.

    No hay parcheo parcial: el valor anterior se descarta.
    """
    result = await db.execute(select(AppSetting).filter(AppSetting.key == key))
    db_setting = result.scalars().first()
    if db_setting:
        db_setting.value = value
        db_setting.updated_at = func.now()
    else:
        db_setting = AppSetting(key=key, value=value)
        db.add(db_setting)
    await db.commit()
    await db.refresh(db_setting)
    return db_setting


async def ping(db: AsyncSession) -> None:
    """Consulta mínima contra app_settings para comprobar la conexión."""
    await db.execute(select(AppSetting.key).limit(1))
