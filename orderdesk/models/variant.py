"""Variant model."""
from decimal import Decimal
from sqlalchemy import (
    Column, BigInteger, Integer, String, Boolean, Numeric, DateTime, ForeignKey,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK


class Variant(Base):
    """Variant - the unit of sale, holds on-hand stock and prices."""

    __tablename__ = 'variant'
    __table_args__ = (
        UniqueConstraint('product_id', 'variant_key', name='uq_variant_product_key'),
        CheckConstraint('stock_on_hand >= 0', name='ck_variant_stock_non_negative'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    product_id = Column(BigInteger, ForeignKey('product.id'), nullable=False)
    sku = Column(String(100), nullable=False, unique=True)
    variant_key = Column(String(500), nullable=False)
    unit = Column(String(30), nullable=False, default='piece', server_default='piece')
    stock_on_hand = Column(Numeric(12, 3), nullable=False, default=Decimal('0'), server_default='0')
    allow_preorder = Column(Boolean, nullable=False, default=False, server_default='false')
    active = Column(Boolean, nullable=False, default=True, server_default='true')
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Every UPDATE is guarded by "WHERE version = <loaded version>"
    __mapper_args__ = {'version_id_col': version}

    # Relationships
    product = relationship('Product', back_populates='variants')
    prices = relationship('VariantPrice', back_populates='variant', cascade='all, delete-orphan')
    option_values = relationship('VariantOptionValue', back_populates='variant', cascade='all, delete-orphan')

    def price_for(self, currency):
        """Return the price in minor units for a currency, or None."""
        for price in self.prices:
            if price.currency == currency:
                return price.price_cents
        return None

    @property
    def display_name(self):
        """Product name followed by the selected option values."""
        values = [ov.option.value for ov in self.option_values if ov.option is not None]
        if not values:
            return self.product.name if self.product else self.sku
        return f"{self.product.name} - {' / '.join(values)}"

    def __repr__(self):
        return f"<Variant(id={self.id}, sku='{self.sku}', stock_on_hand={self.stock_on_hand})>"
