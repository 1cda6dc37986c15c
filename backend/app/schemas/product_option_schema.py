"""
Esquemas Pydantic para las opciones de producto (datos de referencia del formulario).

- ProductOptionCreate: alta desde el panel (POST)
- ProductOptionUpdate: modificación parcial (PUT), todos los campos opcionales
- ProductOptionResponse: lectura (GET)
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

class ProductOptionBase(BaseModel):
    category: str = Field(..., min_length=1, description="Categoría, p.ej. product_type")
    label: str = Field(..., min_length=1, description="Texto visible")
    value: str = Field(..., min_length=1, description="Valor almacenado")
    order_index: int = Field(0, ge=0, description="Orden de aparición")
    is_active: bool = True

class ProductOptionCreate(ProductOptionBase):
    pass

class ProductOptionUpdate(BaseModel):
    category: Optional[str] = Field(None, min_length=1)
    label: Optional[str] = Field(None, min_length=1)
    value: Optional[str] = Field(None, min_length=1)
    order_index: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

class ProductOptionResponse(ProductOptionBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
