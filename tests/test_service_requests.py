"""
Customer-facing service request tests
Tests submitting, viewing, editing, cancelling and deleting requests
"""
import pytest
import json
import logging

from servicehub import db
from servicehub.models import ServiceRequest
from servicehub.services import requests as request_service


def body(response):
    return json.loads(response.data)


class TestSubmitServiceRequest:
    """POST /api/service-requests"""

    def test_per_unit_pricing(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(number_of_units=3))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['unit_price'] == 100.0
        assert data['total_price'] == 300.0
        assert data['status'] == 'Pending'
        assert data['discount_amount'] is None
        assert data['currency'] == 'AED'

    def test_banner_discount_applied(self, client, request_payload, service, banner_factory):
        banner_factory(service, 10)

        response = client.post('/api/service-requests', json=request_payload(number_of_units=3))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['discount_percentage'] == 10.0
        assert data['discount_amount'] == 30.0
        assert data['total_price'] == 270.0

    def test_quotation_without_price(self, client, request_payload, service_factory):
        service = service_factory(name='Custom Renovation', base_price=None)

        response = client.post('/api/service-requests', json=request_payload(
            service_id=service.id,
            request_type='Quotation',
            question_answers=[
                {'question': 'Rooms?', 'answer': '3'},
                {'question': 'Notes', 'answer': ''},
            ],
        ))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['unit_price'] is None
        assert data['total_price'] is None
        assert data['question_answers'] == [{'question': 'Rooms?', 'answer': '3', 'questionType': 'text'}]

    def test_sub_services_snapshot(self, client, request_payload, service_factory):
        service = service_factory(
            name='Upholstery',
            sub_services=[{'name': 'Armchair', 'rate': 60, 'max': 4}, {'name': 'Ottoman', 'rate': 20}],
        )

        response = client.post('/api/service-requests', json=request_payload(
            service_id=service.id,
            number_of_units=2,
            selected_sub_services=[{'name': 'armchair', 'quantity': 2}, {'name': 'Ottoman'}],
        ))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['unit_price'] == 140.0
        assert data['total_price'] == 280.0
        assert data['selected_sub_services'][0] == {'name': 'Armchair', 'quantity': 2, 'rate': 60.0, 'items': 1}

    def test_missing_required_fields(self, client):
        response = client.post('/api/service-requests', json={'user_name': 'Sara'})

        assert response.status_code == 400
        data = body(response)
        assert data['success'] is False
        assert data['code'] == 'MISSING_REQUIRED_FIELDS'
        assert 'service_id' in data['details']

    @pytest.mark.parametrize('field, value, code', [
        ('user_email', 'not-an-email', 'INVALID_EMAIL'),
        ('user_phone', '0123', 'INVALID_PHONE'),
        ('request_type', 'Urgent', 'INVALID_REQUEST_TYPE'),
        ('number_of_units', 0, 'INVALID_NUMBER_OF_UNITS'),
        ('requested_date', 'next tuesday', 'INVALID_DATE'),
        ('payment_method', 'Crypto', 'INVALID_PAYMENT_METHOD'),
    ])
    def test_invalid_fields(self, client, request_payload, field, value, code):
        response = client.post('/api/service-requests', json=request_payload(**{field: value}))

        assert response.status_code == 400
        assert body(response)['code'] == code

    def test_phone_separators_are_ignored(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(user_phone='+971 (50) 123-4567'))

        assert response.status_code == 201

    def test_past_date_rejected(self, client, request_payload, when):
        response = client.post('/api/service-requests', json=request_payload(requested_date=when.future(days=-1)))

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_DATE'

    def test_minimum_advance_notice(self, client, request_payload, service_factory, when):
        service = service_factory(name='Moving', min_advance_hours=48)

        response = client.post('/api/service-requests', json=request_payload(
            service_id=service.id,
            requested_date=when.future(days=1),
        ))

        assert response.status_code == 400
        assert body(response)['code'] == 'INSUFFICIENT_ADVANCE_TIME'

    def test_inactive_service(self, client, request_payload, service_factory):
        service = service_factory(is_active=False)

        response = client.post('/api/service-requests', json=request_payload(service_id=service.id))

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_SERVICE'

    def test_pricing_error_is_reported(self, client, request_payload, service_factory):
        service = service_factory(name='Unpriced', base_price=None)

        response = client.post('/api/service-requests', json=request_payload(service_id=service.id))

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_SERVICE_PRICE'
        assert ServiceRequest.query.count() == 0

    def test_online_payment_normalised(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(payment_method='online payment'))

        data = body(response)['service_request']
        assert data['payment_method'] == 'Online Payment'
        assert data['payment_status'] == 'Pending'
        assert data['payment_type'] == 'full'

    def test_milestone_plan(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(
            number_of_units=10,
            payment_type='milestone',
            milestones=[{'name': 'Deposit', 'percentage': 40}, {'name': 'Handover', 'percentage': 60}],
        ))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['payment_type'] == 'milestone'
        assert [m['amount'] for m in data['milestones']] == [400.0, 600.0]

    def test_invalid_milestone_plan(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(
            payment_type='milestone',
            milestones=[{'name': 'A', 'percentage': 50}, {'name': 'B', 'percentage': 60}],
        ))

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_MILESTONES'
        assert ServiceRequest.query.count() == 0

    @pytest.mark.parametrize('field, value', [
        ('user_name', 12345),
        ('address', ['Villa 12']),
        ('message', {'text': 'Ring twice'}),
    ])
    def test_non_text_fields_rejected(self, client, request_payload, field, value):
        response = client.post('/api/service-requests', json=request_payload(**{field: value}))

        assert response.status_code == 400
        data = body(response)
        assert data['code'] == 'INVALID_FIELD'
        assert data['details'] == [field]
        assert ServiceRequest.query.count() == 0

    def test_rate_priced_service(self, client, request_payload, service_factory):
        service = service_factory(name='Maid Service', unit_type='per_hour', base_price=None,
                                  per_hour_rate=35, per_day_rate=250, per_month_rate=5000)

        response = client.post('/api/service-requests', json=request_payload(
            service_id=service.id,
            number_of_units=1,
            duration_type='days',
            duration=2,
            number_of_persons=3,
        ))

        assert response.status_code == 201
        data = body(response)['service_request']
        assert data['unit_price'] == 250.0
        assert data['total_price'] == 1500.0
        assert (data['duration_type'], data['duration'], data['number_of_persons']) == ('days', 2, 3)

    def test_rate_priced_service_needs_duration_type(self, client, request_payload, service_factory):
        service = service_factory(name='Maid Service', unit_type='per_hour', base_price=None,
                                  per_hour_rate=35, per_day_rate=250, per_month_rate=5000)

        response = client.post('/api/service-requests', json=request_payload(service_id=service.id))

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_DURATION_TYPE'

    def test_signed_in_submitter_is_logged(self, client, auth_headers, customer, request_payload, caplog):
        caplog.set_level(logging.INFO, logger='servicehub.blueprints.service_requests')

        response = client.post('/api/service-requests', json=request_payload(), headers=auth_headers)

        assert response.status_code == 201
        assert f'submitted by {customer.id}' in caplog.text

    def test_guest_submitter_is_logged(self, client, request_payload, caplog):
        caplog.set_level(logging.INFO, logger='servicehub.blueprints.service_requests')

        client.post('/api/service-requests', json=request_payload())

        assert 'submitted by guest' in caplog.text

    def test_response_carries_request_id(self, client, request_payload):
        response = client.post('/api/service-requests', json=request_payload(),
                               headers={'X-Request-ID': 'trace-123'})

        assert response.headers['X-Request-ID'] == 'trace-123'


class TestServiceRequestDetails:
    """GET /api/service-requests/<id>/details"""

    def test_owner_sees_pricing_breakdown(self, client, auth_headers, request_factory, service, banner_factory):
        banner_factory(service, 10)
        service_request = request_factory(number_of_units=3)

        response = client.get(f'/api/service-requests/{service_request.id}/details', headers=auth_headers)

        assert response.status_code == 200
        order = body(response)['order']
        assert order['pricing']['subtotal'] == 300.0
        assert order['pricing']['total_price'] == 270.0
        assert order['service']['name'] == 'Sofa Cleaning'

    def test_stranger_is_refused(self, client, other_headers, request_factory):
        service_request = request_factory()

        response = client.get(f'/api/service-requests/{service_request.id}/details', headers=other_headers)

        assert response.status_code == 403
        assert body(response)['code'] == 'UNAUTHORIZED_ACCESS'

    def test_requires_token(self, client, request_factory):
        service_request = request_factory()

        response = client.get(f'/api/service-requests/{service_request.id}/details')

        assert response.status_code == 401

    def test_unknown_request(self, client, auth_headers):
        response = client.get('/api/service-requests/does-not-exist/details', headers=auth_headers)

        assert response.status_code == 404
        assert body(response)['code'] == 'SERVICE_REQUEST_NOT_FOUND'


class TestUpdateOwnRequest:
    """PUT /api/service-requests/<id>/request-update"""

    def test_units_change_reprices(self, client, auth_headers, request_factory):
        service_request = request_factory(number_of_units=3)

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_units': 5})

        assert response.status_code == 200
        data = body(response)['service_request']
        assert data['number_of_units'] == 5
        assert data['total_price'] == 500.0

    def test_discount_refreshed_from_catalog(self, client, auth_headers, request_factory, service, banner_factory):
        service_request = request_factory(number_of_units=2)
        banner_factory(service, 25)

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_units': 4})

        data = body(response)['service_request']
        assert data['discount_amount'] == 100.0
        assert data['total_price'] == 300.0

    def test_contact_fields_only(self, client, auth_headers, request_factory):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'address': 'Office 4, DIFC', 'message': 'Gate code 1234'})

        data = body(response)['service_request']
        assert data['address'] == 'Office 4, DIFC'
        assert data['total_price'] == 300.0

    def test_no_update_fields(self, client, auth_headers, request_factory):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'status': 'Completed'})

        assert response.status_code == 400
        assert body(response)['code'] == 'NO_UPDATE_FIELDS'

    def test_assigned_request_is_locked(self, client, auth_headers, request_factory, vendor_factory):
        service_request = request_factory()
        request_service.assign_vendor(service_request.id, vendor_factory().id)

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_units': 1})

        assert response.status_code == 400
        data = body(response)
        assert data['code'] == 'REQUEST_NOT_EDITABLE'
        assert 'Assigned' in data['error']

    def test_other_customer_cannot_edit(self, client, other_headers, request_factory):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=other_headers, json={'number_of_units': 1})

        assert response.status_code == 403

    @pytest.fixture
    def upholstery(self, service_factory):
        return service_factory(
            name='Upholstery',
            sub_services=[{'name': 'Armchair', 'rate': 60, 'max': 4}, {'name': 'Ottoman', 'rate': 20}],
        )

    def test_sub_services_change_reprices(self, client, auth_headers, request_factory, upholstery):
        service_request = request_factory(service_id=upholstery.id, number_of_units=1,
                                          selected_sub_services=[{'name': 'Armchair'}])

        response = client.put(f'/api/service-requests/{service_request.id}/request-update', headers=auth_headers,
                              json={'selected_sub_services': [{'name': 'armchair', 'quantity': 2}, {'name': 'Ottoman'}]})

        assert response.status_code == 200
        data = body(response)['service_request']
        assert data['unit_price'] == 140.0
        assert data['total_price'] == 140.0
        assert [line['name'] for line in data['selected_sub_services']] == ['Armchair', 'Ottoman']

    def test_units_change_keeps_stored_sub_services(self, client, auth_headers, request_factory, upholstery):
        service_request = request_factory(service_id=upholstery.id, number_of_units=1,
                                          selected_sub_services=[{'name': 'Armchair', 'quantity': 2}])

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_units': 3})

        assert response.status_code == 200
        data = body(response)['service_request']
        assert data['unit_price'] == 120.0
        assert data['total_price'] == 360.0
        assert data['selected_sub_services'] == [{'name': 'Armchair', 'quantity': 2, 'rate': 60.0, 'items': 1}]

    def test_milestone_amounts_follow_new_total(self, client, auth_headers, request_factory):
        service_request = request_factory(
            number_of_units=2,
            payment_type='milestone',
            milestones=[{'name': 'Deposit', 'percentage': 40}, {'name': 'Handover', 'percentage': 60}],
        )

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_units': 5})

        data = body(response)['service_request']
        assert data['total_price'] == 500.0
        assert [m['amount'] for m in data['milestones']] == [200.0, 300.0]
        assert [m['percentage'] for m in data['milestones']] == [40.0, 60.0]

    def test_failed_reprice_leaves_request_untouched(self, client, auth_headers, request_factory, upholstery):
        service_request = request_factory(service_id=upholstery.id, number_of_units=1,
                                          selected_sub_services=[{'name': 'Armchair'}])

        response = client.put(f'/api/service-requests/{service_request.id}/request-update', headers=auth_headers,
                              json={'address': 'Office 4, DIFC', 'number_of_units': 4,
                                    'selected_sub_services': [{'name': 'Curtains'}]})

        assert response.status_code == 400
        assert body(response)['code'] == 'SUBSERVICE_NOT_FOUND'

        order = body(client.get(f'/api/service-requests/{service_request.id}/details', headers=auth_headers))['order']
        assert order['address'] == 'Villa 12, Jumeirah 1, Dubai'
        assert order['number_of_units'] == 1
        assert order['total_price'] == 60.0
        assert [line['name'] for line in order['selected_sub_services']] == ['Armchair']

    def test_non_text_name_rejected(self, client, auth_headers, request_factory):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'user_name': 12345})

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_FIELD'

    def test_duration_change_reprices_rate_service(self, client, auth_headers, request_factory, service_factory):
        service = service_factory(name='Maid Service', unit_type='per_hour', base_price=None,
                                  per_hour_rate=35, per_day_rate=250, per_month_rate=5000)
        service_request = request_factory(service_id=service.id, number_of_units=1,
                                          duration_type='hours', duration=4)
        assert service_request.total_price == 140.0

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'duration_type': 'days', 'number_of_persons': 2})

        assert response.status_code == 200
        data = body(response)['service_request']
        assert data['total_price'] == 2000.0
        assert (data['duration_type'], data['duration'], data['number_of_persons']) == ('days', 4, 2)

    def test_invalid_number_of_persons(self, client, auth_headers, request_factory, service_factory):
        service = service_factory(name='Maid Service', unit_type='per_hour', base_price=None,
                                  per_hour_rate=35, per_day_rate=250, per_month_rate=5000)
        service_request = request_factory(service_id=service.id, number_of_units=1, duration_type='hours')

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'number_of_persons': 'lots'})

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_NUMBER_OF_PERSONS'

    def test_past_date_rejected(self, client, auth_headers, request_factory, when):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/request-update',
                              headers=auth_headers, json={'requested_date': when.future(days=-2)})

        assert response.status_code == 400
        assert body(response)['code'] == 'INVALID_DATE'


class TestCancelAndDelete:

    def test_cancel_pending(self, client, auth_headers, request_factory):
        service_request = request_factory()

        response = client.put(f'/api/service-requests/{service_request.id}/cancel', headers=auth_headers)

        assert response.status_code == 200
        assert body(response)['service_request']['status'] == 'Cancelled'

    def test_cancel_twice(self, client, auth_headers, request_factory):
        service_request = request_factory()
        client.put(f'/api/service-requests/{service_request.id}/cancel', headers=auth_headers)

        response = client.put(f'/api/service-requests/{service_request.id}/cancel', headers=auth_headers)

        assert response.status_code == 400
        assert body(response)['code'] == 'REQUEST_NOT_CANCELLABLE'

    def test_delete_pending(self, client, auth_headers, request_factory):
        service_request = request_factory()
        request_id = service_request.id

        response = client.delete(f'/api/service-requests/{request_id}/request-delete', headers=auth_headers)

        assert response.status_code == 200
        assert db.session.get(ServiceRequest, request_id) is None

    def test_delete_cancelled_is_refused(self, client, auth_headers, request_factory):
        service_request = request_factory()
        client.put(f'/api/service-requests/{service_request.id}/cancel', headers=auth_headers)

        response = client.delete(f'/api/service-requests/{service_request.id}/request-delete', headers=auth_headers)

        assert response.status_code == 400
        assert body(response)['code'] == 'REQUEST_NOT_DELETABLE'
