"""Product model."""
from sqlalchemy import Column, BigInteger, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK


class Product(Base):
    """Product - the sellable item; variants carry stock and prices."""

    __tablename__ = 'product'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    brand_id = Column(BigInteger, ForeignKey('brand.id'), nullable=True)
    name = Column(String(200), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default='true')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    brand = relationship('Brand', back_populates='products')
    attributes = relationship(
        'ProductAttribute', back_populates='product',
        cascade='all, delete-orphan', order_by='ProductAttribute.sort_order'
    )
    variants = relationship('Variant', back_populates='product', order_by='Variant.id')

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"
