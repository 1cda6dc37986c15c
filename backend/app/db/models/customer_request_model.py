"""
Este archivo contiene el modelo de pedido de cliente (customer_requests).
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base

# Estados válidos de un pedido; no hay transiciones forzadas entre ellos
ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")

class CustomerRequest(Base):
    __tablename__ = "customer_requests"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    lastname = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    status = Column(String(50), nullable=False, default="pending", server_default="pending")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    products = relationship(
        "ProductRequest",
        back_populates="customer_request",
        cascade="all, delete-orphan",
        order_by="ProductRequest.id",
    )

    def __repr__(self):
        return f"<CustomerRequest(id={self.id}, email='{self.email}', status='{self.status}')>"

    def to_dict(self, include_products: bool = True):
        """Convierte el pedido (y opcionalmente sus productos) a un diccionario."""
        data = {
            "id": self.id,
            "name": self.name,
            "lastname": self.lastname,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_products:
            data["products"] = [product.to_dict() for product in self.products]
        return data
