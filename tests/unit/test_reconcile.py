"""
Unit tests for line reconciliation and order totals.
"""

from decimal import Decimal
from types import SimpleNamespace

from orderdesk.services.order_placement_service import reconcile_quantity
from orderdesk.services.order_service import order_totals


class TestReconcileQuantity:
    """Tests for reconcile_quantity()."""

    def test_fully_covered(self):
        """Test a line within stock consumes only what was asked."""
        outcome = reconcile_quantity(Decimal('3'), Decimal('5'))
        assert outcome.is_preorder is False
        assert outcome.consumed == Decimal('3')
        assert outcome.shortfall == Decimal('0')

    def test_exactly_covered_is_not_preorder(self):
        """Test a line equal to stock on hand is not a preorder."""
        outcome = reconcile_quantity(Decimal('5'), Decimal('5'))
        assert outcome.is_preorder is False
        assert outcome.consumed == Decimal('5')

    def test_partial_shortfall(self):
        """Test a partly covered line takes all stock and keeps the rest as shortfall."""
        outcome = reconcile_quantity(Decimal('5'), Decimal('2'))
        assert outcome.is_preorder is True
        assert outcome.consumed == Decimal('2')
        assert outcome.shortfall == Decimal('3')

    def test_nothing_on_hand(self):
        """Test a line against empty stock is a full shortfall."""
        outcome = reconcile_quantity(Decimal('4'), Decimal('0'))
        assert outcome.is_preorder is True
        assert outcome.consumed == Decimal('0')
        assert outcome.shortfall == Decimal('4')

    def test_fractional_quantities(self):
        """Test reconciling fractional quantities."""
        outcome = reconcile_quantity(Decimal('2.5'), Decimal('1.25'))
        assert outcome.consumed == Decimal('1.25')
        assert outcome.shortfall == Decimal('1.25')


def _order(items, delivery_fee=0, discount=0):
    return SimpleNamespace(
        items=[SimpleNamespace(quantity=Decimal(q), unit_price_cents=p) for q, p in items],
        delivery_fee_cents=delivery_fee,
        discount_cents=discount
    )


class TestOrderTotals:
    """Tests for order_totals()."""

    def test_subtotal_and_total(self):
        """Test subtotal, fees and grand total."""
        totals = order_totals(_order([('2', 10000), ('1', 2500)], delivery_fee=1500, discount=500))
        assert totals['subtotal_cents'] == 22500
        assert totals['delivery_fee_cents'] == 1500
        assert totals['discount_cents'] == 500
        assert totals['total_cents'] == 23500

    def test_line_rounds_half_up(self):
        """Test that 0.5 x 25 cents = 12.5 rounds to 13."""
        totals = order_totals(_order([('0.5', 25)]))
        assert totals['subtotal_cents'] == 13

    def test_total_never_negative(self):
        """Test a large discount floors the total at zero."""
        totals = order_totals(_order([('1', 1000)], discount=5000))
        assert totals['total_cents'] == 0

    def test_empty_order(self):
        """Test totals of an order without items."""
        totals = order_totals(_order([]))
        assert totals['subtotal_cents'] == 0
        assert totals['total_cents'] == 0
