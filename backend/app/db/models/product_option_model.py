"""
Modelo de opciones de producto: datos de referencia para los desplegables del formulario.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func

from app.db.database import Base

class ProductOption(Base):
    __tablename__ = "product_options"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(100), nullable=False, index=True)  # p.ej. product_type, zone_option_1
    label = Column(String(255), nullable=False)
    value = Column(String(255), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<ProductOption(id={self.id}, category='{self.category}', value='{self.value}')>"
