"""
Order ledger - order headers, order items and order numbering.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
import logging

from flask import current_app
from sqlalchemy.orm import joinedload, selectinload

from orderdesk.models import (
    Order, OrderItem, Procurement, Variant, VariantOptionValue, DocumentSequence,
    PaymentType, PaymentStatus, PackingStatus
)
from orderdesk.exceptions import OrderDeskError, BusinessLogicError, NotFoundError

logger = logging.getLogger(__name__)

# Fields staff may change after creation (no transition rules)
UPDATABLE_FIELDS = {
    'payment_status': PaymentStatus,
    'packing_status': PackingStatus,
    'payment_type': PaymentType,
    'notes': None,
    'delivery_fee_cents': None,
    'discount_cents': None,
}

# Fields an update may clear with None
NULLABLE_FIELDS = {'notes'}


def next_order_number(session, prefix: Optional[str] = None, padding: Optional[int] = None) -> str:
    """
    Allocate the next order number, e.g. TK-000123.

    The counter row is locked FOR UPDATE and incremented inside the caller's
    transaction: concurrent callers serialize on the row, and a rolled back
    placement gives its number back.
    """
    prefix = prefix or current_app.config.get('ORDER_NUMBER_PREFIX', 'TK')
    padding = padding or current_app.config.get('ORDER_NUMBER_PADDING', 6)

    sequence = session.query(DocumentSequence).filter(
        DocumentSequence.prefix == prefix
    ).with_for_update().populate_existing().one_or_none()

    if sequence is None:
        sequence = _create_sequence(session, prefix)

    sequence.current_number += 1
    session.flush()
    return sequence.format(sequence.current_number, padding)


def create_order(
    session,
    customer_id: int,
    payment_type=PaymentType.MANUAL_TRANSFER,
    delivery_fee_cents: int = 0,
    notes: Optional[str] = None,
    discount_cents: int = 0,
    currency: Optional[str] = None,
    order_number: Optional[str] = None
) -> Order:
    """Insert an order header with NOT_PAID / NOT_READY statuses (caller commits)."""
    order = Order(
        order_number=order_number or next_order_number(session),
        customer_id=customer_id,
        payment_type=PaymentType(payment_type),
        payment_status=PaymentStatus.NOT_PAID,
        packing_status=PackingStatus.NOT_READY,
        currency=currency or current_app.config.get('DEFAULT_CURRENCY', 'IDR'),
        delivery_fee_cents=delivery_fee_cents,
        discount_cents=discount_cents,
        notes=notes
    )
    session.add(order)
    session.flush()
    return order


def add_item(session, order_id: int, variant_id: int, quantity: Decimal,
             unit_price_cents: int, is_preorder: bool) -> OrderItem:
    """Insert an order line (caller commits)."""
    item = OrderItem(
        order_id=order_id,
        variant_id=variant_id,
        quantity=Decimal(str(quantity)),
        unit_price_cents=unit_price_cents,
        is_preorder=is_preorder
    )
    session.add(item)
    session.flush()
    return item


def get_order_with_relations(session, order_id: int) -> Order:
    """
    Fetch an order with customer, items (with variant) and procurements (with variant).

    Raises:
        NotFoundError: if the order does not exist
    """
    variant_options = (
        joinedload(Variant.product),
        selectinload(Variant.option_values).joinedload(VariantOptionValue.option),
    )
    order = (
        session.query(Order)
        .options(
            joinedload(Order.customer),
            selectinload(Order.items).joinedload(OrderItem.variant).options(*variant_options),
            selectinload(Order.procurements).joinedload(Procurement.variant).options(*variant_options),
        )
        .filter(Order.id == order_id)
        .populate_existing()
        .one_or_none()
    )
    if order is None:
        raise NotFoundError(f'Order {order_id} not found')
    return order


def list_orders(session, payment_status: Optional[str] = None,
                packing_status: Optional[str] = None) -> List[Order]:
    """Orders with customer and items, newest first."""
    query = session.query(Order).options(
        joinedload(Order.customer),
        selectinload(Order.items)
    )
    if payment_status:
        query = query.filter(Order.payment_status == PaymentStatus(payment_status))
    if packing_status:
        query = query.filter(Order.packing_status == PackingStatus(packing_status))
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def update_status_fields(session, order_id: int, changes: dict) -> Order:
    """
    Free-form update of status fields, notes and fees, then commit.

    Statuses are a flat enum set by staff; any value may follow any other.
    """
    try:
        order = session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f'Order {order_id} not found')

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                raise BusinessLogicError(f'Field "{field}" cannot be updated')
            if value is None:
                if field in NULLABLE_FIELDS:
                    setattr(order, field, None)
                continue
            enum_cls = UPDATABLE_FIELDS[field]
            setattr(order, field, enum_cls(value) if enum_cls else value)

        session.commit()
        logger.info(f"Order {order.order_number} updated: {sorted(changes)}")
        return order

    except OrderDeskError:
        session.rollback()
        raise
    except Exception:
        session.rollback()
        logger.exception(f"Error updating order {order_id}")
        raise


def order_totals(order: Order) -> dict:
    """
    Money totals of an order, in minor units.

    Each line is quantity * unit price rounded half-up to a whole unit.
    """
    subtotal = 0
    for item in order.items:
        line_total = (Decimal(item.quantity) * item.unit_price_cents).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        subtotal += int(line_total)

    delivery_fee = order.delivery_fee_cents or 0
    discount = order.discount_cents or 0
    return {
        'subtotal_cents': subtotal,
        'delivery_fee_cents': delivery_fee,
        'discount_cents': discount,
        'total_cents': max(0, subtotal + delivery_fee - discount),
    }


def _create_sequence(session, prefix: str) -> DocumentSequence:
    """Create the counter row on first use, tolerating a concurrent creator."""
    dialect = session.get_bind().dialect.name
    if dialect == 'postgresql':
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == 'sqlite':
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise BusinessLogicError(f'Unsupported database backend: {dialect}', status_code=500)

    session.execute(
        insert(DocumentSequence)
        .values(prefix=prefix, current_number=0)
        .on_conflict_do_nothing(index_elements=['prefix'])
    )
    return session.query(DocumentSequence).filter(
        DocumentSequence.prefix == prefix
    ).with_for_update().populate_existing().one()
