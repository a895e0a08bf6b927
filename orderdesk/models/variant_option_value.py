"""Variant Option Value model."""
from sqlalchemy import Column, BigInteger, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from orderdesk.database import Base


class VariantOptionValue(Base):
    """Selected option of one attribute for a variant."""

    __tablename__ = 'variant_option_value'
    __table_args__ = (
        UniqueConstraint('variant_id', 'attribute_id', name='uq_variant_option_attribute'),
    )

    variant_id = Column(BigInteger, ForeignKey('variant.id'), primary_key=True)
    attribute_id = Column(BigInteger, ForeignKey('product_attribute.id'), primary_key=True)
    option_id = Column(BigInteger, ForeignKey('attribute_option.id'), nullable=False)

    variant = relationship('Variant', back_populates='option_values')
    attribute = relationship('ProductAttribute')
    option = relationship('AttributeOption')

    def __repr__(self):
        return f"<VariantOptionValue(variant_id={self.variant_id}, option_id={self.option_id})>"
