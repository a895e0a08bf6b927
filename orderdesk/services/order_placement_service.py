"""
Order placement service with transactional logic.

Turns a validated order request into stock decrements, preorder flags and
procurement records, and persists the order with its items. The whole call
is one unit of work: any failure rolls back every stock change, procurement,
item, the order header and the order-number increment.
"""
from decimal import Decimal
from typing import NamedTuple
import logging

from flask import current_app

from orderdesk.models import Customer, Order, Variant
from orderdesk.exceptions import OrderDeskError, InvalidReferenceError, StockConflictError
from orderdesk.schemas import PlaceOrderRequest
from orderdesk.services.catalog_service import lock_variants, adjust_stock, get_price_cents
from orderdesk.services.order_service import create_order, add_item, get_order_with_relations
from orderdesk.services.procurement_service import create_or_increment
from orderdesk.services.metrics_service import (
    orders_placed_total, order_placement_failures_total,
    preorder_lines_total, stock_conflict_retries_total
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class LineOutcome(NamedTuple):
    """Result of reconciling one requested line against on-hand stock."""
    is_preorder: bool
    consumed: Decimal
    shortfall: Decimal


def reconcile_quantity(requested: Decimal, available: Decimal) -> LineOutcome:
    """
    Decide how a requested quantity is covered by available stock.

    A line that stock cannot fully cover is a preorder as a whole: whatever
    is on hand is consumed and the remainder becomes the shortfall.
    """
    if requested <= available:
        return LineOutcome(is_preorder=False, consumed=requested, shortfall=ZERO)

    on_hand = max(ZERO, available)
    return LineOutcome(is_preorder=True, consumed=on_hand, shortfall=requested - on_hand)


def place_order(session, request: PlaceOrderRequest) -> Order:
    """
    Place an order and commit.

    Steps:
    1. Validate the customer reference
    2. Lock every referenced variant (ascending id) and validate them
    3. Allocate the order number and insert the header
    4. Per item, in input order: reconcile against stock, decrement,
       record the shortfall, snapshot the price, insert the item
    5. Commit and return the hydrated order

    Args:
        session: SQLAlchemy session
        request: Validated PlaceOrderRequest

    Returns:
        Order with customer, items and procurements loaded

    Raises:
        InvalidReferenceError: unknown customer or variant (nothing written)
        BusinessLogicError: variant without a price in the order currency
        StockConflictError: stock kept changing concurrently after retries
    """
    currency = request.currency or current_app.config.get('DEFAULT_CURRENCY', 'IDR')
    max_retries = current_app.config.get('STOCK_CONFLICT_RETRIES', 3)

    try:
        # 1. Customer must exist
        if session.get(Customer, request.customer_id) is None:
            raise InvalidReferenceError('Customer', request.customer_id)

        # 2. Lock variants up front, stable order
        variants = lock_variants(session, [item.variant_id for item in request.items])
        for item in request.items:
            variant = variants.get(item.variant_id)
            if variant is None or not variant.active:
                raise InvalidReferenceError('Variant', item.variant_id)

        # 3. Header (visible to others only after commit)
        order = create_order(
            session,
            customer_id=request.customer_id,
            payment_type=request.payment_type,
            delivery_fee_cents=request.delivery_fee_cents,
            notes=request.notes,
            discount_cents=request.discount_cents,
            currency=currency
        )

        # 4. Lines, strictly in input order
        preorder_lines = 0
        for item in request.items:
            variant = variants[item.variant_id]
            unit_price_cents = get_price_cents(variant, currency)
            outcome = _reconcile_line(session, order.id, item.variant_id, item.quantity, max_retries)

            add_item(
                session,
                order_id=order.id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                unit_price_cents=unit_price_cents,
                is_preorder=outcome.is_preorder
            )
            if outcome.is_preorder:
                preorder_lines += 1

        # 5. Commit
        session.commit()

        orders_placed_total.inc()
        preorder_lines_total.inc(preorder_lines)
        logger.info(
            f"Order {order.order_number} placed: customer={request.customer_id} "
            f"lines={len(request.items)} preorder_lines={preorder_lines}"
        )
        return get_order_with_relations(session, order.id)

    except OrderDeskError as e:
        session.rollback()
        order_placement_failures_total.labels(reason=type(e).__name__).inc()
        logger.warning(f"Order placement rejected: {e.message}")
        raise
    except Exception:
        session.rollback()
        order_placement_failures_total.labels(reason='persistence').inc()
        logger.exception('Order placement failed')
        raise


def _reconcile_line(session, order_id: int, variant_id: int, requested: Decimal,
                    max_retries: int) -> LineOutcome:
    """
    Reconcile one line against the variant's current stock.

    The decision is made on a plain read; adjust_stock() re-reads the row
    under its lock and only writes if stock still equals what was read.
    While place_order() holds the row lock a mismatch can only come from a
    write in this same transaction or from a backend that ignores FOR UPDATE.
    """
    attempt = 0
    while True:
        variant = session.get(Variant, variant_id, populate_existing=True)
        available = Decimal(variant.stock_on_hand)
        outcome = reconcile_quantity(requested, available)

        try:
            if outcome.consumed > 0:
                adjust_stock(session, variant_id, -outcome.consumed, expected_current_stock=available)
        except StockConflictError as e:
            attempt += 1
            if not e.retryable or attempt > max_retries:
                raise
            stock_conflict_retries_total.inc()
            logger.info(f"Stock conflict on variant {variant_id}, retrying ({attempt}/{max_retries})")
            continue

        if outcome.shortfall > 0:
            create_or_increment(session, order_id, variant_id, outcome.shortfall)
        return outcome
