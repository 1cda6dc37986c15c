"""
Fixtures comunes: base de datos SQLite en memoria, cliente HTTP contra la app
y dobles de las integraciones externas (correo y Google Sheets).
"""

import os

# La configuración se lee al importar la app; debe fijarse antes
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret")
os.environ.setdefault("BREVO_API_KEY", "")
os.environ.setdefault("AUTH_BACKEND_URL", "")

from unittest.mock import AsyncMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api import deps
from app.core.config import settings
from app.db.database import Base
from app.db.models import (  # noqa: F401  registra las tablas en Base.metadata
    app_setting_model,
    customer_request_model,
    product_option_model,
    product_request_model,
)
from app.main import app
from app.services import email_service
from app.services.google_sheets_service import google_sheets_service


ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}


def make_order_payload(**overrides):
    """Pedido válido con un producto, como lo envía el formulario."""
    payload = {
        "name": "Ana",
        "lastname": "Pérez",
        "email": "ana@example.com",
        "phone": "",
        "notes": "",
        "products": [
            {
                "patient_name": "Luis",
                "patient_lastname": "Gómez",
                "product_type": "Clásico",
                "template_size": "38",
                "template_color": "Habano",
                "posterior_wedge": "",
            }
        ],
    }
    payload.update(overrides)
    return payload


async def _new_engine():
    return create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
async def engine():
    engine = await _new_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def integrations(monkeypatch):
    """Sustituye correo y Google Sheets por AsyncMock que responden bien."""
    mocks = {
        "customer_email": AsyncMock(return_value={"messageId": "c-1"}),
        "admin_email": AsyncMock(return_value={"messageId": "a-1"}),
        "sheet_append": AsyncMock(return_value={"success": True, "details": {}}),
    }
    monkeypatch.setattr(email_service, "send_customer_confirmation_email", mocks["customer_email"])
    monkeypatch.setattr(email_service, "send_admin_notification_email", mocks["admin_email"])
    monkeypatch.setattr(google_sheets_service, "append_order", mocks["sheet_append"])
    return mocks


def _client_for(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


@pytest.fixture
async def client(session_factory, integrations):
    async with _client_for(session_factory) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client_for_engine(integrations):
    """Cliente contra un motor arbitrario, para esquemas antiguos o rotos."""
    def factory(engine):
        return _client_for(
            async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
        )

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
async def bare_engine():
    """Motor en memoria sin tablas."""
    engine = await _new_engine()
    yield engine
    await engine.dispose()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
