"""
Integration tests for the order ledger.
"""

from decimal import Decimal
import pytest

from orderdesk.exceptions import BusinessLogicError, NotFoundError
from orderdesk.models import PaymentStatus, PackingStatus, PaymentType
from orderdesk.services.order_service import (
    next_order_number, create_order, add_item, get_order_with_relations,
    list_orders, update_status_fields, order_totals
)


class TestOrderNumbers:
    """Tests for next_order_number()."""

    def test_sequence_starts_at_one(self, session):
        """Test the first order numbers."""
        assert next_order_number(session) == 'TK-000001'
        assert next_order_number(session) == 'TK-000002'

    def test_prefixes_are_independent(self, session):
        """Test each prefix keeps its own counter."""
        next_order_number(session)
        assert next_order_number(session, prefix='WS', padding=4) == 'WS-0001'

    def test_rollback_returns_number(self, session):
        """Test a rolled back number is handed out again."""
        next_order_number(session)
        session.rollback()
        assert next_order_number(session) == 'TK-000001'


class TestOrderLedger:
    """Tests for order creation, lookup and updates."""

    @pytest.fixture
    def order(self, session, customer, variant):
        order = create_order(session, customer.id, delivery_fee_cents=2000)
        add_item(session, order.id, variant.id, Decimal('2'), 10000, is_preorder=False)
        session.commit()
        return order

    def test_get_with_relations(self, session, order, variant):
        """Test loading an order with customer and items."""
        loaded = get_order_with_relations(session, order.id)
        assert loaded.order_number == 'TK-000001'
        assert loaded.payment_type == PaymentType.MANUAL_TRANSFER
        assert loaded.customer is not None
        assert [i.variant.id for i in loaded.items] == [variant.id]

    def test_get_unknown(self, session):
        """Test a missing order raises NotFoundError."""
        with pytest.raises(NotFoundError):
            get_order_with_relations(session, 9999)

    def test_totals(self, session, order):
        """Test order totals from stored items."""
        totals = order_totals(get_order_with_relations(session, order.id))
        assert totals == {
            'subtotal_cents': 20000,
            'delivery_fee_cents': 2000,
            'discount_cents': 0,
            'total_cents': 22000,
        }

    def test_update_status_fields(self, session, order):
        """Test updating statuses and notes while None leaves fees alone."""
        update_status_fields(session, order.id, {
            'payment_status': 'PAID',
            'packing_status': PackingStatus.PACKED,
            'notes': 'Ship Monday',
            'delivery_fee_cents': None,
        })
        session.expire_all()
        loaded = get_order_with_relations(session, order.id)
        assert loaded.payment_status == PaymentStatus.PAID
        assert loaded.packing_status == PackingStatus.PACKED
        assert loaded.notes == 'Ship Monday'
        assert loaded.delivery_fee_cents == 2000

    def test_update_clears_notes(self, session, order):
        """Test None clears notes but leaves statuses and fees untouched."""
        update_status_fields(session, order.id, {'notes': 'x'})

        update_status_fields(session, order.id, {
            'notes': None,
            'payment_status': None,
            'discount_cents': None,
        })

        session.expire_all()
        loaded = get_order_with_relations(session, order.id)
        assert loaded.notes is None
        assert loaded.payment_status == PaymentStatus.NOT_PAID
        assert loaded.discount_cents == 0

    def test_any_status_may_follow_any_other(self, session, order):
        """Test payment status can move back."""
        update_status_fields(session, order.id, {'payment_status': 'PAID'})
        update_status_fields(session, order.id, {'payment_status': 'NOT_PAID'})
        assert get_order_with_relations(session, order.id).payment_status == PaymentStatus.NOT_PAID

    def test_update_unknown_field(self, session, order):
        """Test fields outside the editable set are rejected."""
        with pytest.raises(BusinessLogicError):
            update_status_fields(session, order.id, {'order_number': 'X-1'})

    def test_update_unknown_order(self, session):
        """Test updating a missing order raises NotFoundError."""
        with pytest.raises(NotFoundError):
            update_status_fields(session, 9999, {'payment_status': 'PAID'})

    def test_list_filters(self, session, order):
        """Test filtering orders by status."""
        assert len(list_orders(session)) == 1
        assert len(list_orders(session, payment_status='NOT_PAID')) == 1
        assert list_orders(session, payment_status='PAID') == []
        assert list_orders(session, packing_status='PACKED') == []
