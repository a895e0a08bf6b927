"""Customers blueprint (JSON API)."""
from flask import Blueprint, request, jsonify

from orderdesk.database import get_session
from orderdesk.schemas import parse_request, CustomerCreate, CustomerUpdate
from orderdesk.services import customer_service
from orderdesk.utils.serializers import customer_to_dict, order_to_dict

customers_bp = Blueprint('customers', __name__, url_prefix='/api/customers')


@customers_bp.route('', methods=['GET'])
def list_customers_view():
    """List customers; ?search= matches name or phone."""
    session = get_session()
    customers = customer_service.list_customers(session, request.args.get('search'))
    return jsonify([customer_to_dict(c) for c in customers])


@customers_bp.route('/<int:customer_id>', methods=['GET'])
def get_customer_view(customer_id: int):
    session = get_session()
    customer = customer_service.get_customer(session, customer_id)
    data = customer_to_dict(customer)
    data['orders'] = [
        {k: v for k, v in order_to_dict(o, full=False).items() if k not in ('customer', 'items')}
        for o in customer.orders
    ]
    return jsonify(data)


@customers_bp.route('', methods=['POST'])
def create_customer_view():
    payload = parse_request(CustomerCreate, request.get_json(silent=True))
    session = get_session()
    customer = customer_service.create_customer(session, payload.model_dump())
    return jsonify(customer_to_dict(customer)), 201


@customers_bp.route('/<int:customer_id>', methods=['PUT'])
def update_customer_view(customer_id: int):
    payload = parse_request(CustomerUpdate, request.get_json(silent=True))
    session = get_session()
    customer = customer_service.update_customer(session, customer_id, payload.model_dump(exclude_unset=True))
    return jsonify(customer_to_dict(customer))


@customers_bp.route('/<int:customer_id>', methods=['DELETE'])
def delete_customer_view(customer_id: int):
    session = get_session()
    customer_service.delete_customer(session, customer_id)
    return '', 204
