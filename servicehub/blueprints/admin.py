"""
Admin routes for managing service requests and vendor calendars.
"""
from flask import Blueprint, jsonify, request

from servicehub.auth import require_admin
from servicehub.services import requests as request_service

admin_bp = Blueprint('admin', __name__)


def _flag(value):
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


@admin_bp.route('/service-requests', methods=['POST'])
@require_admin
def create_service_request(current_user=None):
    """
    Create a request on a customer's behalf
    POST /api/admin/service-requests

    Same body as the public endpoint; past dates and advance-notice rules
    are not enforced.
    """
    data = request.get_json(silent=True) or {}
    service_request = request_service.submit_request(data, admin_id=current_user.id)

    return jsonify({
        'success': True,
        'message': 'Service request created successfully',
        'service_request': service_request.to_dict(),
    }), 201


@admin_bp.route('/service-requests/<request_id>/status', methods=['PUT'])
@require_admin
def update_service_request_status(request_id, current_user=None):
    """
    Update status and/or vendor
    PUT /api/admin/service-requests/<id>/status
    Body: {"status": "Accepted", "vendor_id": "uuid", "force": false}
    """
    data = request.get_json(silent=True) or {}
    service_request = request_service.update_status(
        request_id,
        status=data.get('status'),
        vendor_id=data.get('vendor_id'),
        force=_flag(data.get('force', False)),
    )

    return jsonify({
        'success': True,
        'message': 'Service request updated successfully',
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/requests/assign', methods=['PATCH'])
@require_admin
def assign_request(current_user=None):
    """
    Assign a vendor
    PATCH /api/admin/requests/assign
    Body: {"request_id": "uuid", "vendor_id": "uuid", "force": false}
    """
    data = request.get_json(silent=True) or {}
    service_request = request_service.assign_vendor(
        data.get('request_id'),
        data.get('vendor_id'),
        force=_flag(data.get('force', False)),
    )

    return jsonify({
        'success': True,
        'message': 'Vendor assigned successfully',
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/service-requests/<request_id>/eligible-vendors', methods=['GET'])
@require_admin
def eligible_vendors(request_id, current_user=None):
    """Every vendor with its eligibility verdict for the request."""
    service_request, results = request_service.list_eligible_vendors(request_id)

    vendors = []
    for vendor, result in results:
        entry = vendor.to_dict()
        entry.update(result.to_dict())
        vendors.append(entry)

    return jsonify({
        'success': True,
        'request_id': service_request.id,
        'eligible_count': sum(1 for _, result in results if result.eligible),
        'vendors': vendors,
    }), 200


@admin_bp.route('/service-requests/<request_id>/quote', methods=['PUT'])
@require_admin
def quote_service_request(request_id, current_user=None):
    """
    Price a quotation
    PUT /api/admin/service-requests/<id>/quote
    Body: {"total_price": 450, "unit_price": 150, "status": "Quoted", "admin_notes": "..."}
    """
    data = request.get_json(silent=True) or {}
    service_request = request_service.quote_request(
        request_id,
        data.get('total_price'),
        unit_price=data.get('unit_price'),
        status=data.get('status'),
        admin_notes=data.get('admin_notes'),
    )

    return jsonify({
        'success': True,
        'message': 'Quotation price updated successfully',
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/service-requests/<request_id>/payment-status', methods=['PUT'])
@require_admin
def update_payment_status(request_id, current_user=None):
    data = request.get_json(silent=True) or {}
    service_request = request_service.record_payment_status(
        request_id,
        data.get('payment_status'),
        details=data.get('payment_details'),
    )

    return jsonify({
        'success': True,
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/service-requests/bulk-delete', methods=['DELETE'])
@require_admin
def bulk_delete_service_requests(current_user=None):
    """
    Delete several requests
    DELETE /api/admin/service-requests/bulk-delete
    Body: {"ids": ["uuid", "uuid"]}
    """
    data = request.get_json(silent=True) or {}
    result = request_service.bulk_delete_requests(data.get('ids'))

    return jsonify({
        'success': True,
        'message': f"{result['deleted_count']} service request(s) deleted",
        **result,
    }), 200


@admin_bp.route('/service-requests/<request_id>', methods=['DELETE'])
@require_admin
def delete_service_request(request_id, current_user=None):
    request_service.delete_request(request_id)

    return jsonify({
        'success': True,
        'message': 'Service request deleted successfully',
    }), 200


@admin_bp.route('/service-requests/<request_id>/milestones', methods=['POST'])
@require_admin
def create_milestones(request_id, current_user=None):
    """
    Set a milestone payment plan on a request
    POST /api/admin/service-requests/<id>/milestones
    Body: {
        "milestones": [{"name": "Deposit", "percentage": 30}, {"name": "Handover", "amount": 700}],
        "require_sequential_payment": true
    }
    """
    data = request.get_json(silent=True) or {}
    require_sequential = data.get('require_sequential_payment')
    service_request = request_service.create_milestone_plan(
        request_id,
        data.get('milestones'),
        require_sequential=None if require_sequential is None else _flag(require_sequential),
    )

    return jsonify({
        'success': True,
        'message': 'Milestones created successfully',
        'service_request': service_request.to_dict(),
    }), 201


@admin_bp.route('/service-requests/<request_id>/milestones/<milestone_id>', methods=['PUT'])
@require_admin
def update_milestone(request_id, milestone_id, current_user=None):
    data = request.get_json(silent=True) or {}
    service_request, milestone = request_service.update_milestone(request_id, milestone_id, data)

    return jsonify({
        'success': True,
        'message': 'Milestone updated successfully',
        'milestone': milestone,
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/service-requests/<request_id>/milestones/<milestone_id>', methods=['DELETE'])
@require_admin
def delete_milestone(request_id, milestone_id, current_user=None):
    service_request = request_service.delete_milestone(request_id, milestone_id)

    return jsonify({
        'success': True,
        'message': 'Milestone deleted successfully',
        'service_request': service_request.to_dict(),
    }), 200


@admin_bp.route('/vendors/<vendor_id>/availability', methods=['PUT'])
@require_admin
def update_vendor_availability(vendor_id, current_user=None):
    """
    Replace a vendor's weekly schedule and/or unavailable dates
    PUT /api/admin/vendors/<id>/availability
    Body: {
        "availability_schedule": [{"dayOfWeek": "Mon", "startTime": "09:00", "endTime": "18:00"}],
        "unavailable_dates": [{"date": "2026-03-10", "reason": "Holiday"}]
    }
    """
    data = request.get_json(silent=True) or {}
    vendor = request_service.update_vendor_availability(
        vendor_id,
        schedule=data.get('availability_schedule'),
        unavailable_dates=data.get('unavailable_dates'),
    )

    return jsonify({
        'success': True,
        'message': 'Vendor availability updated successfully',
        'vendor': vendor.to_dict(),
    }), 200


@admin_bp.route('/vendors/<vendor_id>/slots', methods=['GET'])
@require_admin
def vendor_slots(vendor_id, current_user=None):
    """GET /api/admin/vendors/<id>/slots?date=YYYY-MM-DD"""
    vendor, day, slots = request_service.vendor_slots(vendor_id, request.args.get('date'))

    return jsonify({
        'success': True,
        'vendor_id': vendor.id,
        'date': day.isoformat(),
        'slots': slots,
    }), 200
