"""Customer model."""
from sqlalchemy import Column, String, Text, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK
import enum


class CustomerType(str, enum.Enum):
    """Customer type enum."""
    PERSONAL = 'PERSONAL'
    RESELLER = 'RESELLER'


class Customer(Base):
    """Customer (buyer referenced by orders)."""

    __tablename__ = 'customer'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    customer_type = Column(
        Enum(CustomerType, name='customer_type'), nullable=False, default=CustomerType.PERSONAL
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    orders = relationship('Order', back_populates='customer', order_by='Order.id.desc()')

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', type={self.customer_type})>"
