"""Product Attribute model."""
from sqlalchemy import Column, BigInteger, String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from orderdesk.database import Base, BigIntPK


class ProductAttribute(Base):
    """Attribute of a product (e.g. size, color)."""

    __tablename__ = 'product_attribute'
    __table_args__ = (
        UniqueConstraint('product_id', 'name', name='uq_product_attribute_name'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    product_id = Column(BigInteger, ForeignKey('product.id'), nullable=False)
    name = Column(String(100), nullable=False)
    code = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, server_default='true')

    product = relationship('Product', back_populates='attributes')
    options = relationship(
        'AttributeOption', back_populates='attribute',
        cascade='all, delete-orphan', order_by='AttributeOption.sort_order'
    )

    def __repr__(self):
        return f"<ProductAttribute(id={self.id}, name='{self.name}')>"
