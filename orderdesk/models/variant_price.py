"""Variant Price model."""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK


class VariantPrice(Base):
    """Price of a variant in one currency, stored in minor units (cents)."""

    __tablename__ = 'variant_price'
    __table_args__ = (
        UniqueConstraint('variant_id', 'currency', name='uq_variant_price_currency'),
        CheckConstraint('price_cents >= 0', name='ck_variant_price_non_negative'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    variant_id = Column(BigInteger, ForeignKey('variant.id'), nullable=False)
    currency = Column(String(3), nullable=False)
    price_cents = Column(BigInteger, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    variant = relationship('Variant', back_populates='prices')

    def __repr__(self):
        return f"<VariantPrice(variant_id={self.variant_id}, {self.currency} {self.price_cents})>"
