# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API: la sesión de base de datos, la configuración y
la verificación de la sesión de administrador.
"""

import hmac
import logging
from typing import Any, AsyncGenerator, Dict, Optional

import httpx
from fastapi import Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import AsyncSessionLocal
from app.core.config import settings

logger = logging.getLogger(__name__)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session

def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No autorizado",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _validate_with_auth_backend(token: str) -> Optional[Dict[str, Any]]:
    """Consulta al backend de autenticación externo; devuelve el usuario o None."""
    headers = {"Authorization": f"Bearer {token}"}
    if settings.AUTH_BACKEND_API_KEY:
        headers["apikey"] = settings.AUTH_BACKEND_API_KEY
    url = f"{settings.AUTH_BACKEND_URL.rstrip('/')}/auth/v1/user"
    try:
        async with httpx.AsyncClient(timeout=settings.AUTH_TIMEOUT) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"No se pudo validar la sesión contra el backend de autenticación: {e}")
        return None
    if response.status_code != 200:
        return None
    try:
        return response.json()
    except ValueError:
        logger.error("El backend de autenticación devolvió una respuesta sin JSON válido")
        return None


async def require_admin(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    """
    Exige una sesión de administrador válida.

    Se acepta el ADMIN_TOKEN configurado o un token que el backend de
    autenticación reconozca. No hay roles: cualquier sesión válida da acceso
    completo y cualquier otra cosa recibe el mismo 401.
    """
    token = _bearer_token(authorization)
    if not token:
        raise _unauthorized()

    if settings.ADMIN_TOKEN and hmac.compare_digest(token, settings.ADMIN_TOKEN):
        return {"id": "admin", "source": "admin_token"}

    if settings.AUTH_BACKEND_URL:
        user = await _validate_with_auth_backend(token)
        if user:
            return user

    logger.warning("Acceso de administrador rechazado")
    raise _unauthorized()