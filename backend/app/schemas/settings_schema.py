"""
Esquemas de la configuración compartida guardada en app_settings.

form_config decide qué campos opcionales muestra el formulario público y con
qué etiqueta. products_colors asigna a cada tipo de plantilla sus colores.
"""

from typing import Dict, List
from pydantic import BaseModel, ConfigDict, RootModel

class FormConfig(BaseModel):
    """Bloque completo de form_config; las secciones ausentes toman los valores por defecto al leer."""
    orderFields: Dict[str, bool] = {}
    orderLabels: Dict[str, str] = {}
    productFields: Dict[str, bool] = {}
    productLabels: Dict[str, str] = {}

    # Se conservan claves desconocidas para no perder datos de versiones más nuevas del panel
    model_config = ConfigDict(extra="allow")

class ProductsColors(RootModel[Dict[str, List[str]]]):
    """Mapeo tipo de plantilla -> colores permitidos."""
    pass
