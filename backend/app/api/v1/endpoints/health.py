# backend/app/api/v1/endpoints/health.py
"""
Sonda de salud: comprueba que la base de datos responde.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.crud import setting_crud

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("")
async def health_check(db: AsyncSession = Depends(deps.get_db)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await setting_crud.ping(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check fallido: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "status": "unhealthy",
                "timestamp": timestamp,
                "error": "Database connection failed",
            },
        )
    return {
        "success": True,
        "status": "healthy",
        "timestamp": timestamp,
        "services": {"database": "connected", "api": "operational"},
    }
