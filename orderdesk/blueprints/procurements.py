"""Procurement blueprint - "to buy" list and status transitions (JSON API)."""
from flask import Blueprint, request, jsonify

from orderdesk.database import get_session
from orderdesk.exceptions import BusinessLogicError
from orderdesk.models import ProcurementStatus
from orderdesk.schemas import parse_request, UpdateProcurementRequest
from orderdesk.services.procurement_service import list_procurements, transition
from orderdesk.utils.serializers import procurement_to_dict

procurements_bp = Blueprint('procurements', __name__, url_prefix='/api/procurements')


@procurements_bp.route('', methods=['GET'])
def list_procurements_view():
    session = get_session()
    status = request.args.get('status', '').strip() or None
    if status and status not in {s.value for s in ProcurementStatus}:
        raise BusinessLogicError(f'Invalid status "{status}"')

    procurements = list_procurements(session, status=status)
    return jsonify([procurement_to_dict(p, with_order=True) for p in procurements])


@procurements_bp.route('/<int:procurement_id>', methods=['PUT'])
def update_procurement_view(procurement_id: int):
    """Move a procurement forward; entering ARRIVED credits stock once."""
    payload = parse_request(UpdateProcurementRequest, request.get_json(silent=True))
    session = get_session()

    procurement = transition(session, procurement_id, payload.status, notes=payload.notes)
    return jsonify(procurement_to_dict(procurement, with_order=True))
