# backend/app/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic_settings import BaseSettings
from typing import Optional
import os

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Underfeet Pedidos API"
    PROJECT_VERSION: str = "0.1.0"
    APP_URL: str = "http://localhost:3000"
    # Zona horaria en la que se muestran las fechas (correos, hoja de cálculo y CSV)
    APP_TIMEZONE: str = "America/Argentina/Buenos_Aires"

    # Configuración de la base de datos
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "postgres")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "user")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "underfeet_db")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    # Permite apuntar a una base gestionada externa con una URL completa
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        """URL de conexión a la base de datos asíncrona."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Autenticación del panel de administración
    # ADMIN_TOKEN: token estático; AUTH_BACKEND_URL: backend externo que valida sesiones
    ADMIN_TOKEN: Optional[str] = None
    AUTH_BACKEND_URL: Optional[str] = None
    AUTH_BACKEND_API_KEY: Optional[str] = None
    AUTH_TIMEOUT: float = 10.0

    # Webhook de la base de datos (pedido creado)
    WEBHOOK_SECRET: Optional[str] = None

    # Email transaccional (API HTTP de Brevo)
    BREVO_API_KEY: Optional[str] = None
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    EMAIL_FROM: str = "noreply@example.com"
    EMAIL_FROM_NAME: str = "Sistema"
    ADMIN_EMAIL: str = "admin@example.com"
    EMAIL_TIMEOUT: float = 30.0

    # Google Sheets - cuenta de servicio
    GOOGLE_SHEETS_CLIENT_EMAIL: Optional[str] = None
    GOOGLE_SHEETS_PRIVATE_KEY: Optional[str] = None
    GOOGLE_SHEETS_CREDENTIALS_FILE: Optional[str] = None
    GOOGLE_SHEETS_SPREADSHEET_ID: Optional[str] = None
    GOOGLE_SHEETS_SHEET_NAME: str = "Pedidos"

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        case_sensitive = False

# Instancia global de la configuración
settings = Settings()
