"""Attribute Option model."""
from sqlalchemy import Column, BigInteger, String, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from orderdesk.database import Base, BigIntPK


class AttributeOption(Base):
    """One selectable value of a product attribute (e.g. "XL", "Black")."""

    __tablename__ = 'attribute_option'
    __table_args__ = (
        UniqueConstraint('attribute_id', 'value', name='uq_attribute_option_value'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    attribute_id = Column(BigInteger, ForeignKey('product_attribute.id'), nullable=False)
    value = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, server_default='true')

    attribute = relationship('ProductAttribute', back_populates='options')

    def __repr__(self):
        return f"<AttributeOption(id={self.id}, value='{self.value}')>"
