"""
Se encarga de definir los esquemas Pydantic para los pedidos (CustomerRequest)
y sus productos (ProductRequest).

La validación ocurre antes de cualquier escritura: un pedido con un solo campo
inválido se rechaza completo.
"""

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator, model_validator
from typing import List, Optional
from datetime import datetime
import enum

# Valor centinela para la cuña posterior cuando no se elige ninguna
NO_POSTERIOR_WEDGE = "ninguna"

# Campo de milímetros -> (campo padre, valores del padre que lo habilitan)
CONDITIONAL_MM_FIELDS = {
    "anterior_wedge_mm": ("anterior_wedge", {"Cuña Anterior Interna"}),
    "anterior_wedge_left_mm": ("anterior_wedge_left", {"Cuña Anterior Interna"}),
    "heel_raise_mm": ("rearfoot_calcaneus", {"Realce en talón"}),
    "heel_raise_left_mm": ("rearfoot_calcaneus_left", {"Realce en talón"}),
    "posterior_wedge_mm": ("posterior_wedge", {"Cuña Posterior Externa", "Cuña Posterior Interna"}),
    "posterior_wedge_left_mm": ("posterior_wedge_left", {"Cuña Posterior Externa", "Cuña Posterior Interna"}),
}

class OrderStatus(str, enum.Enum):
    """Define los posibles estados de un pedido."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# ========================================
# PRODUCTOS
# ========================================

class ProductRequestBase(BaseModel):
    """Configuración de una plantilla. Todo salvo tipo y paciente es opcional."""
    patient_name: str = Field(..., description="Nombre del paciente")
    patient_lastname: str = Field("", description="Apellido del paciente")
    product_type: str = Field(..., description="Tipo de plantilla")
    template_size: str = ""
    template_color: str = ""

    forefoot_metatarsal: str = ""
    forefoot_metatarsal_left: str = ""
    anterior_wedge: str = ""
    anterior_wedge_mm: str = ""
    anterior_wedge_left: str = ""
    anterior_wedge_left_mm: str = ""
    midfoot_arch: str = ""
    midfoot_arch_left: str = ""
    midfoot_external_wedge: str = ""
    rearfoot_calcaneus: str = ""
    rearfoot_calcaneus_left: str = ""
    heel_raise_mm: str = ""
    heel_raise_left_mm: str = ""
    posterior_wedge: str = NO_POSTERIOR_WEDGE
    posterior_wedge_mm: str = ""
    posterior_wedge_left: str = ""
    posterior_wedge_left_mm: str = ""

class ProductRequestCreate(ProductRequestBase):
    """Esquema de entrada de un producto dentro de un pedido."""

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        # El formulario envía null para los selectores que no se tocaron
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("patient_name")
    @classmethod
    def validate_patient_name(cls, v):
        if not v:
            raise ValueError("Debe ingresar el nombre del paciente")
        return v

    @field_validator("product_type")
    @classmethod
    def validate_product_type(cls, v):
        if not v:
            raise ValueError("Debe seleccionar un tipo de producto")
        return v

    @field_validator("posterior_wedge")
    @classmethod
    def default_posterior_wedge(cls, v):
        return v or NO_POSTERIOR_WEDGE

    @model_validator(mode="after")
    def clear_locked_mm_values(self):
        """Un valor en mm solo tiene sentido si su selector padre lo habilita."""
        for mm_field, (parent_field, unlocking) in CONDITIONAL_MM_FIELDS.items():
            if getattr(self, mm_field) and getattr(self, parent_field) not in unlocking:
                setattr(self, mm_field, "")
        return self

# Campos de texto de un producto; en la base pueden venir como NULL
STRING_FIELDS = tuple(ProductRequestBase.model_fields)

class ProductRequest(ProductRequestBase):
    """Esquema de respuesta de un producto almacenado."""
    id: int
    customer_request_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator(*STRING_FIELDS, mode="before")
    @classmethod
    def none_to_empty(cls, v):
        # Filas antiguas guardan NULL en las columnas que no existían
        return "" if v is None else v

# ========================================
# PEDIDOS
# ========================================

class OrderBase(BaseModel):
    """Datos del cliente que realiza el pedido."""
    name: str = Field(..., description="Nombre del cliente o profesional")
    lastname: str = Field(..., description="Apellido del cliente")
    email: EmailStr = Field(..., description="Email del cliente")
    phone: Optional[str] = Field(None, description="Teléfono (opcional)")

class OrderCreate(OrderBase):
    """Esquema para crear un pedido con su lista de productos."""
    products: List[ProductRequestCreate] = Field(..., description="Productos del pedido", min_length=1)
    notes: str = Field("", description="Observaciones")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError("El nombre debe tener al menos 2 caracteres")
        return v.strip()

    @field_validator("lastname")
    @classmethod
    def validate_lastname(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError("El apellido debe tener al menos 2 caracteres")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def blank_phone_to_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("notes", mode="before")
    @classmethod
    def none_notes_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("products")
    @classmethod
    def validate_products(cls, v):
        if not v:
            raise ValueError("Debe agregar al menos un producto")
        return v

class Order(OrderBase):
    """Esquema completo de respuesta para un pedido."""
    id: int
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    email: str
    products: List[ProductRequest] = []

    model_config = ConfigDict(from_attributes=True)

class OrderSummary(OrderBase):
    """Fila del listado de pedidos en el panel."""
    id: int
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    email: str
    products_count: int = 0

class OrderUpdate(BaseModel):
    """Cambios que el administrador puede hacer sobre un pedido."""
    status: Optional[OrderStatus] = Field(None, description="Nuevo estado del pedido")
    notes: Optional[str] = Field(None, description="Notas internas")

class OrderCreated(BaseModel):
    """Respuesta del envío del formulario público."""
    success: bool = True
    message: str = "Pedido creado exitosamente"
    orderId: int

class OrderExportRequest(BaseModel):
    """Filtros para la exportación de pedidos."""
    format: str = Field("csv", pattern="^(csv|json)$")
    dateFrom: Optional[datetime] = None
    dateTo: Optional[datetime] = None
    status: Optional[str] = None
