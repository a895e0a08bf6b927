"""Customer service - plain CRUD with the order-reference guard on delete."""
from typing import List, Optional
import logging

from sqlalchemy import or_, func

from orderdesk.models import Customer, CustomerType, Order
from orderdesk.exceptions import BusinessLogicError, NotFoundError

logger = logging.getLogger(__name__)

# Optional contact fields an update may clear with None
NULLABLE_FIELDS = {'phone_number', 'address', 'city', 'province', 'postal_code', 'notes'}


def list_customers(session, search: Optional[str] = None) -> List[Customer]:
    """Customers newest first, optionally filtered by name or phone (case-insensitive)."""
    query = session.query(Customer)
    if search:
        pattern = f'%{search.strip().lower()[:100]}%'
        query = query.filter(or_(
            func.lower(Customer.name).like(pattern),
            func.lower(Customer.phone_number).like(pattern)
        ))
    return query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()


def get_customer(session, customer_id: int) -> Customer:
    """Fetch a customer or raise NotFoundError."""
    customer = session.get(Customer, customer_id)
    if not customer:
        raise NotFoundError(f'Customer {customer_id} not found')
    return customer


def create_customer(session, data: dict) -> Customer:
    """Create a customer from validated fields."""
    data = dict(data)
    data['customer_type'] = CustomerType(data.get('customer_type') or CustomerType.PERSONAL)
    customer = Customer(**data)
    session.add(customer)
    session.commit()
    logger.info(f"Customer created: {customer.id} ({customer.name})")
    return customer


def update_customer(session, customer_id: int, changes: dict) -> Customer:
    """Apply a partial update; None clears optional fields and is ignored for name and type."""
    customer = get_customer(session, customer_id)
    for field, value in changes.items():
        if value is None:
            if field in NULLABLE_FIELDS:
                setattr(customer, field, None)
            continue
        if field == 'customer_type':
            value = CustomerType(value)
        setattr(customer, field, value)
    session.commit()
    return customer


def delete_customer(session, customer_id: int) -> None:
    """
    Delete a customer.

    Raises:
        NotFoundError: unknown customer
        BusinessLogicError: the customer has orders
    """
    customer = get_customer(session, customer_id)

    has_orders = session.query(Order.id).filter(Order.customer_id == customer_id).first() is not None
    if has_orders:
        raise BusinessLogicError('Cannot delete customer with existing orders')

    session.delete(customer)
    session.commit()
    logger.info(f"Customer deleted: {customer_id}")
