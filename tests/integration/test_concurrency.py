"""
Concurrent order placement against one variant with limited stock.

Runs on a file-backed SQLite database with a regular connection pool, so
every worker gets its own connection and transaction. Set
TEST_DATABASE_URL to run the same scenario against PostgreSQL.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
import os
import threading

import pytest
from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from orderdesk.database import Base, build_engine
from orderdesk.exceptions import StockConflictError
from orderdesk.models import Order, OrderItem, Procurement, Variant
from orderdesk.schemas import PlaceOrderRequest
from orderdesk.services import catalog_service, customer_service
from orderdesk.services.order_placement_service import place_order

WORKERS = 8
INITIAL_STOCK = Decimal('5')
QUANTITY = Decimal('2')


@pytest.fixture
def shared_db(app, tmp_path):
    """Engine and session factory on a database every thread can reach."""
    uri = os.getenv('TEST_DATABASE_URL') or f"sqlite:///{tmp_path / 'orderdesk.db'}"
    engine = build_engine(uri)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def stocked_variant(app, shared_db):
    """Customer and a single-option variant with limited stock; returns their ids."""
    session = shared_db()
    with app.app_context():
        customer = customer_service.create_customer(session, {'name': 'Budi Santoso'})
        product = catalog_service.create_product(session, 'Tee')
        size = catalog_service.create_attribute(session, product.id, 'Size')
        small = catalog_service.create_attribute_option(session, size.id, 'S')
        variant = catalog_service.create_variant(
            session,
            product.id,
            sku='TEE-S',
            selections=[(size.id, small.id)],
            price_cents=10000,
            currency='IDR',
            stock_on_hand=INITIAL_STOCK,
            allow_preorder=True
        )
        ids = customer.id, variant.id
    session.close()
    return ids


class TestConcurrentPlacement:
    """Tests for simultaneous placements competing for the same stock."""

    def test_simultaneous_orders_share_stock(self, app, shared_db, stocked_variant):
        """Test parallel placements never oversell and never reuse an order number."""
        customer_id, variant_id = stocked_variant
        barrier = threading.Barrier(WORKERS)

        def place_one(_):
            request = PlaceOrderRequest.model_validate({
                'customerId': customer_id,
                'items': [{'variantId': variant_id, 'quantity': str(QUANTITY)}],
            })
            session = shared_db()
            try:
                with app.app_context():
                    barrier.wait(timeout=30)
                    try:
                        order = place_order(session, request)
                    except StockConflictError as e:
                        return ('conflict', e.status_code)
                    return ('placed', order.order_number)
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(place_one, range(WORKERS)))

        placed = [value for kind, value in results if kind == 'placed']
        conflicts = [value for kind, value in results if kind == 'conflict']
        assert len(placed) + len(conflicts) == WORKERS
        assert placed
        assert len(set(placed)) == len(placed)
        assert all(status == 409 for status in conflicts)

        session = shared_db()
        try:
            stock = session.get(Variant, variant_id).stock_on_hand
            assert stock >= 0

            ordered = session.query(func.coalesce(func.sum(OrderItem.quantity), 0)).scalar()
            backordered = session.query(func.coalesce(func.sum(Procurement.needed_qty), 0)).scalar()
            consumed = Decimal(ordered) - Decimal(backordered)
            assert consumed == INITIAL_STOCK - Decimal(stock)
            assert consumed <= INITIAL_STOCK

            # Rolled back placements leave no header, item or procurement behind
            orders = session.query(Order).all()
            assert sorted(o.order_number for o in orders) == sorted(placed)
            assert all(len(o.items) == 1 for o in orders)
            assert session.query(OrderItem).count() == len(placed)
            order_ids = {o.id for o in orders}
            assert all(p.order_id in order_ids for p in session.query(Procurement).all())
        finally:
            session.close()

    def test_all_placements_succeed_when_writers_queue(self, app, shared_db, stocked_variant):
        """Test queued writers all commit and the stock runs out exactly once."""
        customer_id, variant_id = stocked_variant

        def place_one(_):
            request = PlaceOrderRequest.model_validate({
                'customerId': customer_id,
                'items': [{'variantId': variant_id, 'quantity': '1'}],
            })
            session = shared_db()
            try:
                with app.app_context():
                    return place_order(session, request).items[0].is_preorder
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            preorder_flags = list(pool.map(place_one, range(WORKERS)))

        assert preorder_flags.count(False) == int(INITIAL_STOCK)
        assert preorder_flags.count(True) == WORKERS - int(INITIAL_STOCK)

        session = shared_db()
        try:
            assert session.get(Variant, variant_id).stock_on_hand == 0
            assert session.query(Order).count() == WORKERS
        finally:
            session.close()
