"""Procurement model."""
from sqlalchemy import Column, BigInteger, Numeric, Text, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK
import enum


class ProcurementStatus(str, enum.Enum):
    """Procurement lifecycle, forward-only."""
    TO_BUY = 'TO_BUY'
    ORDERED = 'ORDERED'
    ARRIVED = 'ARRIVED'

    @property
    def rank(self):
        return _STATUS_RANK[self]


_STATUS_RANK = {
    ProcurementStatus.TO_BUY: 0,
    ProcurementStatus.ORDERED: 1,
    ProcurementStatus.ARRIVED: 2,
}


class Procurement(Base):
    """Procurement ("to buy" task) created from an order shortfall."""

    __tablename__ = 'procurement'
    __table_args__ = (
        CheckConstraint('needed_qty > 0', name='ck_procurement_needed_qty_positive'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('customer_order.id'), nullable=False, index=True)
    variant_id = Column(BigInteger, ForeignKey('variant.id'), nullable=False, index=True)
    needed_qty = Column(Numeric(12, 3), nullable=False)
    status = Column(
        Enum(ProcurementStatus, name='procurement_status'), nullable=False, default=ProcurementStatus.TO_BUY
    )
    notes = Column(Text, nullable=True)
    arrived_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships (lookup only, procurements do not own orders or variants)
    order = relationship('Order', back_populates='procurements')
    variant = relationship('Variant')

    def __repr__(self):
        return f"<Procurement(id={self.id}, variant_id={self.variant_id}, status={self.status.value})>"
