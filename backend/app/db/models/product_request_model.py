"""
Este archivo contiene el modelo de producto solicitado (product_requests).

Cada fila es una plantilla con su paciente y la configuración por zona del pie.
Las columnas *_left corresponden al pie izquierdo; las demás al derecho.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base

# Columnas de configuración, en el orden en que se muestran y exportan
PRODUCT_FIELDS = (
    "patient_name",
    "patient_lastname",
    "product_type",
    "template_size",
    "template_color",
    "forefoot_metatarsal",
    "forefoot_metatarsal_left",
    "anterior_wedge",
    "anterior_wedge_mm",
    "anterior_wedge_left",
    "anterior_wedge_left_mm",
    "midfoot_arch",
    "midfoot_arch_left",
    "midfoot_external_wedge",
    "rearfoot_calcaneus",
    "rearfoot_calcaneus_left",
    "heel_raise_mm",
    "heel_raise_left_mm",
    "posterior_wedge",
    "posterior_wedge_mm",
    "posterior_wedge_left",
    "posterior_wedge_left_mm",
)

# Subconjunto mínimo que aceptan los despliegues con el esquema antiguo
LEGACY_PRODUCT_FIELDS = ("product_type", "posterior_wedge")

class ProductRequest(Base):
    __tablename__ = "product_requests"

    id = Column(Integer, primary_key=True, index=True)
    customer_request_id = Column(
        Integer,
        ForeignKey("customer_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Datos del paciente (pueden diferir del cliente que hace el pedido)
    patient_name = Column(String(255), nullable=True)
    patient_lastname = Column(String(255), nullable=True)

    # Selección principal
    product_type = Column(String(255), nullable=False)
    template_size = Column(String(50), nullable=True)
    template_color = Column(String(100), nullable=True)

    # Antepié
    forefoot_metatarsal = Column(String(255), nullable=True)
    forefoot_metatarsal_left = Column(String(255), nullable=True)
    anterior_wedge = Column(String(255), nullable=True)
    anterior_wedge_mm = Column(String(50), nullable=True)
    anterior_wedge_left = Column(String(255), nullable=True)
    anterior_wedge_left_mm = Column(String(50), nullable=True)

    # Mediopié
    midfoot_arch = Column(String(255), nullable=True)
    midfoot_arch_left = Column(String(255), nullable=True)
    midfoot_external_wedge = Column(String(255), nullable=True)

    # Retropié
    rearfoot_calcaneus = Column(String(255), nullable=True)
    rearfoot_calcaneus_left = Column(String(255), nullable=True)
    heel_raise_mm = Column(String(50), nullable=True)
    heel_raise_left_mm = Column(String(50), nullable=True)

    # Cuña posterior
    posterior_wedge = Column(String(255), nullable=True)
    posterior_wedge_mm = Column(String(50), nullable=True)
    posterior_wedge_left = Column(String(255), nullable=True)
    posterior_wedge_left_mm = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer_request = relationship("CustomerRequest", back_populates="products")

    def __repr__(self):
        return f"<ProductRequest(id={self.id}, order={self.customer_request_id}, type='{self.product_type}')>"

    def to_dict(self):
        data = {"id": self.id, "customer_request_id": self.customer_request_id}
        for field in PRODUCT_FIELDS:
            data[field] = getattr(self, field)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data
