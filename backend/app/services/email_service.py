# backend/app/services/email_service.py
"""
Servicio de Envío de Correo para la aplicación.

Envía los correos transaccionales de un pedido a través de la API HTTP de
Brevo: la confirmación al cliente y el aviso al administrador. Ambas plantillas
se construyen a partir de los mismos datos del pedido.

Las funciones de envío lanzan excepción si algo falla; quien las llama decide
si el error se propaga o solo se registra.
"""

import html
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.timezone import to_local_time

logger = logging.getLogger(__name__)

EMPTY_VALUE = "—"

SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
    "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

# Etiqueta visible -> campo del producto, en el orden en que aparecen en el correo
PRODUCT_OPTION_LABELS = (
    ("Talle", "template_size"),
    ("Color", "template_color"),
    ("Antepié - Zona metatarsal (Pie Izquierdo)", "forefoot_metatarsal_left"),
    ("Antepié - Zona metatarsal (Pie Derecho)", "forefoot_metatarsal"),
    ("Cuña Anterior (Pie Izquierdo)", "anterior_wedge_left"),
    ("Cuña Anterior Espesor - Pie Izquierdo (mm)", "anterior_wedge_left_mm"),
    ("Cuña Anterior (Pie Derecho)", "anterior_wedge"),
    ("Cuña Anterior Espesor - Pie Derecho (mm)", "anterior_wedge_mm"),
    ("Mediopié - Zona del arco (Pie Izquierdo)", "midfoot_arch_left"),
    ("Mediopié - Zona del arco (Pie Derecho)", "midfoot_arch"),
    ("Cuña Mediopié Externa", "midfoot_external_wedge"),
    ("Retropié - Zona calcáneo (Pie Izquierdo)", "rearfoot_calcaneus_left"),
    ("Realce en talón - Pie Izquierdo (mm)", "heel_raise_left_mm"),
    ("Retropié - Zona calcáneo (Pie Derecho)", "rearfoot_calcaneus"),
    ("Realce en talón - Pie Derecho (mm)", "heel_raise_mm"),
    ("Cuña Posterior (Pie Izquierdo)", "posterior_wedge_left"),
    ("Cuña Posterior Espesor - Pie Izquierdo (mm)", "posterior_wedge_left_mm"),
    ("Cuña Posterior (Pie Derecho)", "posterior_wedge"),
    ("Cuña Posterior Espesor - Pie Derecho (mm)", "posterior_wedge_mm"),
)


class EmailConfigurationError(RuntimeError):
    """Falta la clave de la API de correo."""


# --- Utilidades de formato ---

def _display(value: Any) -> str:
    """Escapa un valor para HTML; los vacíos se muestran con un guion largo."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return EMPTY_VALUE
    return html.escape(str(value))


def _format_date(value: Optional[datetime]) -> str:
    if not value:
        return EMPTY_VALUE
    value = to_local_time(value)
    return f"{value.day} de {SPANISH_MONTHS[value.month - 1]} de {value.year}, {value:%H:%M}"


def product_options(product: Dict[str, Any]) -> List[tuple]:
    """Pares (etiqueta, valor) de la configuración de un producto, incluidos los vacíos."""
    return [(label, product.get(field)) for label, field in PRODUCT_OPTION_LABELS]


def _products_html(order_data: Dict[str, Any]) -> str:
    items_html = ""
    for index, product in enumerate(order_data.get("products", []), start=1):
        patient = f"{product.get('patient_name') or ''} {product.get('patient_lastname') or ''}".strip()
        options_html = "".join(
            f"<li><strong>{html.escape(label)}:</strong> {_display(value)}</li>"
            for label, value in product_options(product)
        )
        items_html += f"""
            <div class="product-item">
                <h4>Producto {index}: {_display(product.get('product_type'))}</h4>
                <p><strong>Paciente:</strong> {_display(patient)}</p>
                <p><strong>Cantidad:</strong> 1</p>
                <ul>{options_html}</ul>
            </div>
        """
    return items_html

# --- Plantillas HTML ---

_BASE_STYLE = """
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0; background-color: #f8fafc; }}
    .container {{ max-width: 600px; margin: 0 auto; background: white; border-radius: 8px; overflow: hidden; }}
    .header {{ background: {accent}; color: white; padding: 32px 24px; text-align: center; }}
    .content {{ padding: 32px 24px; }}
    .info {{ background: #f1f5f9; border-radius: 8px; padding: 20px; margin: 24px 0; }}
    .product-item {{ border-left: 4px solid {accent}; padding: 16px; margin: 16px 0; background: #f8fafc; }}
    .footer {{ background: #f1f5f9; padding: 24px; text-align: center; color: #64748b; font-size: 14px; }}
"""


def generate_customer_email_html(order_data: Dict[str, Any]) -> str:
    """Genera el correo de confirmación para el cliente."""
    customer_name = f"{order_data.get('name', '')} {order_data.get('lastname', '')}".strip()
    return f"""
    <!DOCTYPE html>
    <html lang="es">
    <head>
        <meta charset="UTF-8">
        <title>Confirmación de Pedido</title>
        <style>{_BASE_STYLE.format(accent="#0ea5e9")}</style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>¡Pedido Confirmado!</h1>
                <p>Gracias por confiar en nosotros</p>
            </div>
            <div class="content">
                <p>Estimado/a <strong>{_display(customer_name)}</strong>,</p>
                <p>Hemos recibido correctamente su pedido de plantillas ortopédicas. A continuación encontrará los detalles:</p>
                <div class="info">
                    <h3>Información del Pedido</h3>
                    <p><strong>Número de pedido:</strong> #{_display(order_data.get('id'))}</p>
                    <p><strong>Fecha:</strong> {_format_date(order_data.get('created_at'))}</p>
                    <p><strong>Total de productos:</strong> {len(order_data.get('products', []))}</p>
                    <p><strong>Observaciones:</strong> {_display(order_data.get('notes'))}</p>
                </div>
                <h3>Productos Solicitados</h3>
                {_products_html(order_data)}
                <p>Nuestro equipo revisará su pedido y se pondrá en contacto con usted en las próximas 24-48 horas.</p>
            </div>
            <div class="footer">
                <p>Este es un email automático, por favor no responda a este mensaje.</p>
            </div>
        </div>
    </body>
    </html>
    """


def generate_admin_email_html(order_data: Dict[str, Any]) -> str:
    """Genera el aviso de nuevo pedido para el administrador."""
    return f"""
    <!DOCTYPE html>
    <html lang="es">
    <head>
        <meta charset="UTF-8">
        <title>Nuevo Pedido Recibido</title>
        <style>{_BASE_STYLE.format(accent="#dc2626")}</style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>Nuevo Pedido Recibido</h1>
                <p>Pedido #{_display(order_data.get('id'))}</p>
            </div>
            <div class="content">
                <div class="info">
                    <h3>Datos del Cliente</h3>
                    <p><strong>Nombre:</strong> {_display(order_data.get('name'))}</p>
                    <p><strong>Apellido:</strong> {_display(order_data.get('lastname'))}</p>
                    <p><strong>Email:</strong> {_display(order_data.get('email'))}</p>
                    <p><strong>Teléfono:</strong> {_display(order_data.get('phone'))}</p>
                    <p><strong>Fecha:</strong> {_format_date(order_data.get('created_at'))}</p>
                    <p><strong>Observaciones:</strong> {_display(order_data.get('notes'))}</p>
                </div>
                <h3>Productos ({len(order_data.get('products', []))})</h3>
                {_products_html(order_data)}
                <p><a href="{html.escape(settings.APP_URL)}/admin/orders/{_display(order_data.get('id'))}">Ver pedido en el panel</a></p>
            </div>
        </div>
    </body>
    </html>
    """

# --- Servicio de Envío de Correo ---

async def _send_email(to_email: str, subject: str, html_content: str) -> Dict[str, Any]:
    """Llama a la API de Brevo y devuelve su respuesta JSON."""
    if not settings.BREVO_API_KEY:
        raise EmailConfigurationError("BREVO_API_KEY no configurado")

    payload = {
        "sender": {"email": settings.EMAIL_FROM, "name": settings.EMAIL_FROM_NAME},
        "to": [{"email": to_email}],
        "subject": subject,
        "htmlContent": html_content,
    }
    headers = {
        "api-key": settings.BREVO_API_KEY,
        "content-type": "application/json",
        "accept": "application/json",
    }
    try:
        async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT) as client:
            response = await client.post(settings.BREVO_API_URL, json=payload, headers=headers)
            response.raise_for_status()
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                logger.warning(f"Respuesta de la API de correo sin JSON válido para {to_email}")
                return {}
    except httpx.HTTPStatusError as e:
        logger.error(f"Error HTTP enviando correo a {to_email}: {e.response.status_code} - {e.response.text}")
        raise


async def send_customer_confirmation_email(order_data: Dict[str, Any]) -> Dict[str, Any]:
    """Envía al cliente la confirmación de su pedido."""
    logger.info(f"Enviando confirmación del pedido {order_data.get('id')} a {order_data.get('email')}")
    result = await _send_email(
        order_data["email"],
        f"Confirmación de pedido #{order_data.get('id')}",
        generate_customer_email_html(order_data),
    )
    logger.info(f"Confirmación del pedido {order_data.get('id')} enviada")
    return result


async def send_admin_notification_email(order_data: Dict[str, Any]) -> Dict[str, Any]:
    """Avisa al administrador de un pedido nuevo."""
    logger.info(f"Enviando aviso del pedido {order_data.get('id')} a {settings.ADMIN_EMAIL}")
    result = await _send_email(
        settings.ADMIN_EMAIL,
        f"Nuevo pedido recibido #{order_data.get('id')}",
        generate_admin_email_html(order_data),
    )
    logger.info(f"Aviso del pedido {order_data.get('id')} enviado")
    return result


async def send_test_email(to_email: Optional[str] = None) -> Dict[str, Any]:
    """Correo de prueba para la verificación de integraciones."""
    recipient = to_email or settings.ADMIN_EMAIL or settings.EMAIL_FROM
    content = (
        "<p>Este es un email de prueba enviado desde el sistema de pedidos.</p>"
        f"<p>Fecha: {datetime.now().isoformat()}</p>"
        f"<p>App: {html.escape(settings.APP_URL)}</p>"
    )
    return await _send_email(recipient, "Prueba de integraciones - Sistema de Pedidos", content)


def is_configured() -> bool:
    return bool(settings.BREVO_API_KEY)
