"""Order model."""
from sqlalchemy import Column, BigInteger, String, Text, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from orderdesk.database import Base, BigIntPK
import enum


class PaymentType(str, enum.Enum):
    """How the customer pays."""
    MANUAL_TRANSFER = 'MANUAL_TRANSFER'
    CASH = 'CASH'
    CARD = 'CARD'


class PaymentStatus(str, enum.Enum):
    """Payment status, set by staff."""
    NOT_PAID = 'NOT_PAID'
    DOWN_PAYMENT = 'DOWN_PAYMENT'
    PAID = 'PAID'


class PackingStatus(str, enum.Enum):
    """Packing status, set by staff."""
    NOT_READY = 'NOT_READY'
    PACKING = 'PACKING'
    PACKED = 'PACKED'


class Order(Base):
    """Order (one customer purchase event)."""

    __tablename__ = 'customer_order'
    __table_args__ = (
        CheckConstraint('delivery_fee_cents >= 0', name='ck_order_delivery_fee_non_negative'),
        CheckConstraint('discount_cents >= 0', name='ck_order_discount_non_negative'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_number = Column(String(32), nullable=False, unique=True, index=True)
    customer_id = Column(BigInteger, ForeignKey('customer.id'), nullable=False)
    payment_type = Column(
        Enum(PaymentType, name='payment_type'), nullable=False, default=PaymentType.MANUAL_TRANSFER
    )
    payment_status = Column(
        Enum(PaymentStatus, name='payment_status'), nullable=False, default=PaymentStatus.NOT_PAID
    )
    packing_status = Column(
        Enum(PackingStatus, name='packing_status'), nullable=False, default=PackingStatus.NOT_READY
    )
    currency = Column(String(3), nullable=False)
    delivery_fee_cents = Column(BigInteger, nullable=False, default=0, server_default='0')
    discount_cents = Column(BigInteger, nullable=False, default=0, server_default='0')
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    customer = relationship('Customer', back_populates='orders')
    items = relationship(
        'OrderItem', back_populates='order',
        cascade='all, delete-orphan', order_by='OrderItem.id'
    )
    procurements = relationship('Procurement', back_populates='order', order_by='Procurement.id')

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}')>"
