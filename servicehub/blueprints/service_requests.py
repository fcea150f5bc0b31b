"""
Customer-facing service request routes.

Business-rule failures are raised as ``EngineError`` and rendered by the
handler registered in ``create_app``.
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from servicehub.auth import optional_auth, require_auth
from servicehub.extensions import limiter
from servicehub.errors import OwnershipError
from servicehub.services import lifecycle, requests as request_service

logger = logging.getLogger(__name__)

service_requests_bp = Blueprint('service_requests', __name__)


def _submit_limit():
    return current_app.config.get('SUBMIT_RATE_LIMIT', '10 per minute')


@service_requests_bp.route('', methods=['POST'])
@limiter.limit(_submit_limit)
@optional_auth
def submit_service_request(current_user=None):
    """
    Submit a service request
    POST /api/service-requests
    Body: {
        "user_name": "Sara Ali",
        "user_email": "sara@example.com",
        "user_phone": "+971501234567",
        "address": "Villa 12, Jumeirah 1",
        "service_id": "uuid",
        "category_id": "uuid",
        "request_type": "Scheduled",
        "requested_date": "2026-03-02T10:00:00+04:00",
        "number_of_units": 2,
        "selected_sub_services": [{"name": "Deep clean", "quantity": 1}],
        "payment_method": "Cash On Delivery"
    }
    """
    data = request.get_json(silent=True) or {}
    service_request = request_service.submit_request(data)
    logger.info(
        "Service request %s submitted by %s",
        service_request.id, current_user.id if current_user else "guest",
    )

    return jsonify({
        'success': True,
        'message': 'Service request submitted successfully',
        'service_request': service_request.to_dict(),
    }), 201


@service_requests_bp.route('/<request_id>/details', methods=['GET'])
@require_auth
def get_service_request_details(request_id, current_user=None):
    """Order details for the owner or an admin."""
    service_request = request_service.get_request(request_id)
    if not current_user.is_admin and not lifecycle.owns_request(current_user, service_request):
        raise OwnershipError()

    return jsonify({
        'success': True,
        'order': request_service.get_order_details(request_id),
    }), 200


@service_requests_bp.route('/<request_id>/request-update', methods=['PUT'])
@require_auth
def update_service_request(request_id, current_user=None):
    """Edit a Pending request owned by the caller."""
    data = request.get_json(silent=True) or {}
    service_request = request_service.update_own_request(request_id, current_user, data)

    return jsonify({
        'success': True,
        'message': 'Service request updated successfully',
        'service_request': service_request.to_dict(),
    }), 200


@service_requests_bp.route('/<request_id>/cancel', methods=['PUT'])
@require_auth
def cancel_service_request(request_id, current_user=None):
    service_request = request_service.cancel_own_request(request_id, current_user)

    return jsonify({
        'success': True,
        'message': 'Service request cancelled successfully',
        'service_request': service_request.to_dict(),
    }), 200


@service_requests_bp.route('/<request_id>/request-delete', methods=['DELETE'])
@require_auth
def delete_service_request(request_id, current_user=None):
    request_service.delete_own_request(request_id, current_user)

    return jsonify({
        'success': True,
        'message': 'Service request deleted successfully',
    }), 200
