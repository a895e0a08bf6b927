"""Orders blueprint - order placement and status updates (JSON API)."""
from flask import Blueprint, request, jsonify, current_app

from orderdesk.database import get_session
from orderdesk.exceptions import BusinessLogicError
from orderdesk.models import PaymentStatus, PackingStatus
from orderdesk.schemas import parse_request, PlaceOrderRequest, UpdateOrderRequest
from orderdesk.services.order_placement_service import place_order
from orderdesk.services.order_service import (
    get_order_with_relations, list_orders, update_status_fields, order_totals
)
from orderdesk.utils.serializers import order_to_dict

orders_bp = Blueprint('orders', __name__, url_prefix='/api/orders')


def _enum_arg(name: str, enum_cls):
    """Read an optional enum query parameter, rejecting unknown values."""
    value = request.args.get(name, '').strip()
    if not value:
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ', '.join(e.value for e in enum_cls)
        raise BusinessLogicError(f'Invalid {name} "{value}". Allowed: {allowed}')


@orders_bp.route('', methods=['GET'])
def list_orders_view():
    """List orders, optionally filtered by payment (status) and packing status."""
    session = get_session()
    orders = list_orders(
        session,
        payment_status=_enum_arg('status', PaymentStatus),
        packing_status=_enum_arg('packingStatus', PackingStatus)
    )
    return jsonify([order_to_dict(o, totals=order_totals(o), full=False) for o in orders])


@orders_bp.route('/<int:order_id>', methods=['GET'])
def get_order_view(order_id: int):
    session = get_session()
    order = get_order_with_relations(session, order_id)
    return jsonify(order_to_dict(order, totals=order_totals(order)))


@orders_bp.route('', methods=['POST'])
def create_order_view():
    """
    Place an order.

    201 with the hydrated order; 400 on invalid input or unknown references;
    409 when stock kept changing concurrently.
    """
    payload = parse_request(PlaceOrderRequest, request.get_json(silent=True))
    session = get_session()

    order = place_order(session, payload)
    current_app.logger.info(f"POST /api/orders -> {order.order_number}")
    return jsonify(order_to_dict(order, totals=order_totals(order))), 201


@orders_bp.route('/<int:order_id>', methods=['PUT'])
def update_order_view(order_id: int):
    """Partial update of payment/packing status, notes and delivery fee."""
    payload = parse_request(UpdateOrderRequest, request.get_json(silent=True))
    session = get_session()

    update_status_fields(session, order_id, payload.model_dump(exclude_unset=True))
    order = get_order_with_relations(session, order_id)
    return jsonify(order_to_dict(order, totals=order_totals(order)))
