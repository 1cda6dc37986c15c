import asyncio
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.core.config import settings
from app.core.timezone import to_local_time

logger = logging.getLogger(__name__)

# --- Configuración de la API de Google Sheets ---
SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
TOKEN_URI = 'https://oauth2.googleapis.com/token'

SHEET_HEADERS = [
    "Timestamp",
    "Orden ID",
    "Empresa / Profesional",
    "Email",
    "Teléfono",
    "Nombre del Paciente",
    "Apellido del Paciente",
    "Tipo Plantilla",
    "Talle",
    "Color",
    "Antepié - Zona metatarsal (Pie Izquierdo)",
    "Antepié - Zona metatarsal (Pie Derecho)",
    "Cuña Anterior (Pie Izquierdo)",
    "Cuña Anterior Espesor - Pie Izquierdo (mm)",
    "Cuña Anterior (Pie Derecho)",
    "Cuña Anterior Espesor - Pie Derecho (mm)",
    "Mediopié - Zona del arco (Pie Izquierdo)",
    "Mediopié - Zona del arco (Pie Derecho)",
    "Retropié - Zona calcáneo (Pie Izquierdo)",
    "Realce en talón - Pie Izquierdo (mm)",
    "Retropié - Zona calcáneo (Pie Derecho)",
    "Realce en talón - Pie Derecho (mm)",
    "Cuña Posterior (Pie Izquierdo)",
    "Cuña Posterior Espesor - Pie Izquierdo (mm)",
    "Cuña Posterior (Pie Derecho)",
    "Cuña Posterior Espesor - Pie Derecho (mm)",
    "Observaciones",
]

# Columnas de producto, alineadas con SHEET_HEADERS a partir de "Nombre del Paciente"
SHEET_PRODUCT_FIELDS = [
    "patient_name",
    "patient_lastname",
    "product_type",
    "template_size",
    "template_color",
    "forefoot_metatarsal_left",
    "forefoot_metatarsal",
    "anterior_wedge_left",
    "anterior_wedge_left_mm",
    "anterior_wedge",
    "anterior_wedge_mm",
    "midfoot_arch_left",
    "midfoot_arch",
    "rearfoot_calcaneus_left",
    "heel_raise_left_mm",
    "rearfoot_calcaneus",
    "heel_raise_mm",
    "posterior_wedge_left",
    "posterior_wedge_left_mm",
    "posterior_wedge",
    "posterior_wedge_mm",
]

HEADER_BACKGROUND = {"red": 0.2, "green": 0.6, "blue": 0.9}


def _normalize_private_key(raw: Optional[str]) -> Optional[str]:
    """Quita comillas envolventes y convierte los '\\n' escapados en saltos de línea."""
    if not raw:
        return None
    key = raw.strip()
    if len(key) >= 2 and key[0] == key[-1] == '"':
        key = key[1:-1]
    return key.replace('\\n', '\n')


def _format_timestamp(value: Optional[datetime]) -> str:
    """Fecha del pedido en APP_TIMEZONE, formato YYYY-MM-DD HH:MM:SS."""
    return to_local_time(value or datetime.now(timezone.utc)).strftime('%Y-%m-%d %H:%M:%S')


def build_order_rows(order_data: Dict[str, Any]) -> List[List[str]]:
    """
    Filas de la hoja para un pedido: una por producto.

    La primera fila lleva los datos del pedido y las observaciones; las
    siguientes dejan esas columnas vacías.
    """
    products = order_data.get("products") or [{}]
    customer = f"{order_data.get('name') or ''} {order_data.get('lastname') or ''}".strip()

    rows = []
    for index, product in enumerate(products):
        if index == 0:
            base_cols = [
                _format_timestamp(order_data.get("created_at")),
                str(order_data.get("id") or ''),
                customer,
                order_data.get("email") or '',
                order_data.get("phone") or '',
            ]
            note_col = [order_data.get("notes") or '']
        else:
            base_cols = ['', '', '', '', '']
            note_col = ['']
        product_cols = [product.get(field) or '' for field in SHEET_PRODUCT_FIELDS]
        rows.append(base_cols + product_cols + note_col)
    return rows


class GoogleSheetsService:
    def __init__(self, service=None):
        self.creds = None
        self.service = service
        # El cliente httplib2 no admite llamadas simultáneas desde varios hilos
        self._lock = threading.Lock()
        self.spreadsheet_id = settings.GOOGLE_SHEETS_SPREADSHEET_ID
        if self.service is not None:
            return

        try:
            self.creds = self._load_credentials()
        except (ValueError, OSError) as e:
            logger.error(f"Credenciales de Google Sheets inválidas: {e}", exc_info=True)
            return

        if self.creds and self.spreadsheet_id:
            self.service = build('sheets', 'v4', credentials=self.creds, cache_discovery=False)
            logger.info("Servicio de Google Sheets inicializado correctamente.")
        else:
            missing = []
            if not self.creds:
                missing.append("GOOGLE_SHEETS_CLIENT_EMAIL/GOOGLE_SHEETS_PRIVATE_KEY")
            if not self.spreadsheet_id:
                missing.append("GOOGLE_SHEETS_SPREADSHEET_ID")
            logger.warning(f"Google Sheets no configurado, faltan: {', '.join(missing)}")

    @staticmethod
    def _load_credentials():
        if settings.GOOGLE_SHEETS_CREDENTIALS_FILE:
            return service_account.Credentials.from_service_account_file(
                settings.GOOGLE_SHEETS_CREDENTIALS_FILE, scopes=SCOPES
            )
        private_key = _normalize_private_key(settings.GOOGLE_SHEETS_PRIVATE_KEY)
        if not settings.GOOGLE_SHEETS_CLIENT_EMAIL or not private_key:
            return None
        return service_account.Credentials.from_service_account_info(
            {
                "client_email": settings.GOOGLE_SHEETS_CLIENT_EMAIL,
                "private_key": private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES,
        )

    @property
    def is_configured(self) -> bool:
        return self.service is not None

    # --- Operaciones síncronas sobre la API ---

    def _sheet_ids(self) -> Dict[str, int]:
        """Título de cada pestaña -> sheetId."""
        response = self.service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id,
            fields='sheets(properties(sheetId,title))',
        ).execute()
        return {
            sheet['properties']['title']: sheet['properties']['sheetId']
            for sheet in response.get('sheets', [])
        }

    def ensure_sheet_exists(self, sheet_name: str) -> Tuple[int, bool]:
        """Crea la pestaña si no existe. Devuelve (sheetId, creada)."""
        sheet_ids = self._sheet_ids()
        if sheet_name in sheet_ids:
            return sheet_ids[sheet_name], False

        logger.info(f"La hoja '{sheet_name}' no existe, creándola...")
        response = self.service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={'requests': [{
                'addSheet': {
                    'properties': {
                        'title': sheet_name,
                        'gridProperties': {'rowCount': 1000, 'columnCount': 30},
                    }
                }
            }]},
        ).execute()
        sheet_id = response['replies'][0]['addSheet']['properties']['sheetId']
        logger.info(f"Hoja '{sheet_name}' creada con sheetId {sheet_id}")
        return sheet_id, True

    def _has_headers(self, sheet_name: str) -> bool:
        response = self.service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=f"{sheet_name}!A1:A1",
        ).execute()
        return bool(response.get('values'))

    def write_headers(self, sheet_name: str, sheet_id: int) -> None:
        """Escribe la fila de encabezados y le aplica formato."""
        self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=f"{sheet_name}!A1:AZ1",
            valueInputOption='USER_ENTERED',
            body={'values': [SHEET_HEADERS]},
        ).execute()

        # El formato es accesorio: si falla, los encabezados ya están escritos
        try:
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={'requests': [{
                    'repeatCell': {
                        'range': {
                            'sheetId': sheet_id,
                            'startRowIndex': 0,
                            'endRowIndex': 1,
                            'startColumnIndex': 0,
                            'endColumnIndex': len(SHEET_HEADERS),
                        },
                        'cell': {
                            'userEnteredFormat': {
                                'backgroundColor': HEADER_BACKGROUND,
                                'textFormat': {
                                    'foregroundColor': {'red': 1, 'green': 1, 'blue': 1},
                                    'bold': True,
                                },
                            }
                        },
                        'fields': 'userEnteredFormat(backgroundColor,textFormat)',
                    }
                }]},
            ).execute()
        except HttpError as e:
            logger.warning(f"Se omitió el formato de los encabezados de '{sheet_name}': {e}")

    def _prepare_sheet(self, sheet_name: str) -> None:
        sheet_id, created = self.ensure_sheet_exists(sheet_name)
        if created or not self._has_headers(sheet_name):
            self.write_headers(sheet_name, sheet_id)

    def add_order_to_sheet(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Añade las filas de un pedido al final de la hoja de pedidos.

        No hay deduplicación: enviar el mismo pedido dos veces lo duplica.
        """
        if not self.service:
            return {"success": False, "error": "Google Sheets no configurado"}

        sheet_name = settings.GOOGLE_SHEETS_SHEET_NAME
        rows = build_order_rows(order_data)
        try:
            with self._lock:
                self._prepare_sheet(sheet_name)
                response = self.service.spreadsheets().values().append(
                    spreadsheetId=self.spreadsheet_id,
                    range=f"{sheet_name}!A:AZ",
                    valueInputOption='USER_ENTERED',
                    insertDataOption='INSERT_ROWS',
                    body={'values': rows},
                ).execute()
            updates = response.get('updates', {})
            logger.info(
                f"Pedido {order_data.get('id')} añadido a Google Sheets: "
                f"{updates.get('updatedRange')} ({updates.get('updatedRows')} filas)"
            )
            return {
                "success": True,
                "details": {
                    "updatedRange": updates.get('updatedRange'),
                    "updatedCells": updates.get('updatedCells'),
                },
            }
        except HttpError as e:
            status_code = e.resp.status if e.resp is not None else None
            if status_code == 403:
                message = "Permiso denegado. Verifica que la cuenta de servicio tenga acceso a la hoja."
            elif status_code == 404:
                message = "Hoja de cálculo no encontrada. Verifica el ID de la hoja."
            else:
                message = f"Error de la API de Google ({status_code})"
            logger.error(f"Error al añadir el pedido {order_data.get('id')} a Google Sheets: {e}")
            return {"success": False, "error": message, "details": {"status": status_code}}
        except GoogleAuthError as e:
            logger.error(f"Credenciales de Google rechazadas al añadir el pedido {order_data.get('id')}: {e}")
            return {"success": False, "error": "Credenciales de Google inválidas o revocadas"}

    def export_all_orders(self, orders: List[Dict[str, Any]]) -> bool:
        """Vuelca todos los pedidos en una pestaña nueva Export_YYYY-MM-DD."""
        if not self.service:
            logger.error("Google Sheets no configurado, no se puede exportar")
            return False

        sheet_name = f"Export_{datetime.now().strftime('%Y-%m-%d')}"
        all_rows = [row for order in orders for row in build_order_rows(order)]
        try:
            with self._lock:
                sheet_id, _ = self.ensure_sheet_exists(sheet_name)
                self.write_headers(sheet_name, sheet_id)
                if all_rows:
                    self.service.spreadsheets().values().update(
                        spreadsheetId=self.spreadsheet_id,
                        range=f"{sheet_name}!A2:AZ{len(all_rows) + 1}",
                        valueInputOption='RAW',
                        body={'values': all_rows},
                    ).execute()
            logger.info(f"{len(orders)} pedidos exportados a la hoja '{sheet_name}'")
            return True
        except (HttpError, GoogleAuthError) as e:
            logger.error(f"Error exportando pedidos a Google Sheets: {e}", exc_info=True)
            return False

    def test_connection(self) -> bool:
        if not self.service:
            logger.warning(
                "Google Sheets: variables incompletas. Requiere GOOGLE_SHEETS_CLIENT_EMAIL, "
                "GOOGLE_SHEETS_PRIVATE_KEY y GOOGLE_SHEETS_SPREADSHEET_ID"
            )
            return False
        try:
            with self._lock:
                self.service.spreadsheets().get(spreadsheetId=self.spreadsheet_id).execute()
            return True
        except (HttpError, GoogleAuthError) as e:
            logger.error(f"Google Sheets: prueba de conexión fallida: {e}")
            return False

    # --- Envoltorios asíncronos ---
    # El cliente de Google es bloqueante; se ejecuta en un hilo aparte

    async def append_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self.add_order_to_sheet, order_data)

    async def export_orders(self, orders: List[Dict[str, Any]]) -> bool:
        return await asyncio.to_thread(self.export_all_orders, orders)

    async def check_connection(self) -> bool:
        return await asyncio.to_thread(self.test_connection)


# Instancia única del servicio para ser usada en la aplicación
google_sheets_service = GoogleSheetsService()
