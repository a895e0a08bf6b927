"""Order Item model."""
from sqlalchemy import Column, BigInteger, Boolean, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from orderdesk.database import Base, BigIntPK


class OrderItem(Base):
    """Order Item (priced, quantified line of an order)."""

    __tablename__ = 'order_item'
    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_quantity_positive'),
    )

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('customer_order.id'), nullable=False)
    variant_id = Column(BigInteger, ForeignKey('variant.id'), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=False)
    # Price snapshot taken at order time, in minor units
    unit_price_cents = Column(BigInteger, nullable=False)
    is_preorder = Column(Boolean, nullable=False, default=False, server_default='false')

    # Relationships
    order = relationship('Order', back_populates='items')
    variant = relationship('Variant')

    def __repr__(self):
        return f"<OrderItem(id={self.id}, variant_id={self.variant_id}, quantity={self.quantity})>"
