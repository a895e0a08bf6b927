"""
Procurement ledger - "to buy" tasks created from order shortfalls.

Status only moves forward: TO_BUY -> ORDERED -> ARRIVED. Entering ARRIVED
credits the variant's stock with needed_qty, exactly once.
"""
from decimal import Decimal
from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy.orm import joinedload

from orderdesk.models import Procurement, ProcurementStatus, Order
from orderdesk.exceptions import OrderDeskError, BusinessLogicError, NotFoundError, InvalidTransitionError
from orderdesk.services.catalog_service import adjust_stock
from orderdesk.services.metrics_service import procurement_arrivals_total

logger = logging.getLogger(__name__)


def create_or_increment(session, order_id: int, variant_id: int, needed_qty: Decimal) -> Procurement:
    """
    Record a shortfall for (order, variant).

    An open TO_BUY record for the same pair absorbs the extra quantity;
    otherwise a new TO_BUY record is inserted. Caller commits.
    """
    needed_qty = Decimal(str(needed_qty))
    if needed_qty <= 0:
        raise BusinessLogicError('Needed quantity must be greater than 0')

    procurement = session.query(Procurement).filter(
        Procurement.order_id == order_id,
        Procurement.variant_id == variant_id,
        Procurement.status == ProcurementStatus.TO_BUY
    ).with_for_update().first()

    if procurement:
        procurement.needed_qty = Decimal(procurement.needed_qty) + needed_qty
    else:
        procurement = Procurement(
            order_id=order_id,
            variant_id=variant_id,
            needed_qty=needed_qty,
            status=ProcurementStatus.TO_BUY
        )
        session.add(procurement)

    session.flush()
    logger.info(f"Procurement {procurement.id}: order={order_id} variant={variant_id} needed={procurement.needed_qty}")
    return procurement


def transition(session, procurement_id: int, new_status, notes: Optional[str] = None) -> Procurement:
    """
    Move a procurement forward and commit.

    - Same status: returned unchanged (notes may still be updated)
    - Backward move: InvalidTransitionError, nothing changes
    - Into ARRIVED: stock += needed_qty in the same transaction

    Raises:
        NotFoundError: unknown procurement
        InvalidTransitionError: backward move
    """
    new_status = ProcurementStatus(new_status)

    try:
        procurement = session.query(Procurement).filter(
            Procurement.id == procurement_id
        ).with_for_update().populate_existing().one_or_none()

        if procurement is None:
            raise NotFoundError(f'Procurement {procurement_id} not found')

        current = procurement.status
        if new_status.rank < current.rank:
            raise InvalidTransitionError(current.value, new_status.value)

        if notes is not None:
            procurement.notes = notes

        if new_status != current:
            if new_status == ProcurementStatus.ARRIVED:
                adjust_stock(session, procurement.variant_id, Decimal(procurement.needed_qty))
                procurement.arrived_at = datetime.now(timezone.utc)
                procurement_arrivals_total.inc()
            procurement.status = new_status
            logger.info(f"Procurement {procurement_id}: {current.value} -> {new_status.value}")

        session.commit()
        return procurement

    except OrderDeskError:
        session.rollback()
        raise
    except Exception:
        session.rollback()
        logger.exception(f"Error updating procurement {procurement_id}")
        raise


def get_procurement(session, procurement_id: int) -> Procurement:
    """Fetch a procurement or raise NotFoundError."""
    procurement = session.get(Procurement, procurement_id)
    if not procurement:
        raise NotFoundError(f'Procurement {procurement_id} not found')
    return procurement


def list_procurements(session, status: Optional[str] = None) -> List[Procurement]:
    """Procurements with their variant and order (with customer), newest first."""
    query = session.query(Procurement).options(
        joinedload(Procurement.variant),
        joinedload(Procurement.order).joinedload(Order.customer)
    )
    if status:
        query = query.filter(Procurement.status == ProcurementStatus(status))
    return query.order_by(Procurement.created_at.desc(), Procurement.id.desc()).all()
