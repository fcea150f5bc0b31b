"""
Pytest configuration and fixtures for ServiceHub backend tests
"""
import jwt
import pytest
from types import SimpleNamespace
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from flask import current_app

from servicehub import create_app, db
from servicehub.models import Banner, Category, Service, User, Vendor
from servicehub.services import requests as request_service

BUSINESS_TZ = ZoneInfo('Asia/Dubai')


def future_iso(days=3, hours=0):
    """ISO timestamp comfortably in the future."""
    return (datetime.now(timezone.utc) + timedelta(days=days, hours=hours)).isoformat()


def next_weekday_at(weekday, hour, minute=0):
    """Next occurrence (at least a day away) of *weekday* at a Dubai wall-clock time."""
    now = datetime.now(BUSINESS_TZ)
    days_ahead = (weekday - now.weekday()) % 7 or 7
    target = now + timedelta(days=days_ahead)
    return target.replace(hour=hour, minute=minute, second=0, microsecond=0).isoformat()


@pytest.fixture
def app():
    """Create application instance with a fresh in-memory database"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def customer(app):
    user = User(email='sara@example.com', phone='+971501234567', name='Sara Ali', role='customer')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def other_customer(app):
    user = User(email='omar@example.com', phone='+971509999999', name='Omar Hassan', role='customer')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin(app):
    user = User(email='ops@servicehub.test', phone='+971500000001', name='Ops Team', role='admin')
    db.session.add(user)
    db.session.commit()
    return user


def generate_token(user_id, expires_in=timedelta(days=1)):
    """Sign a bearer token the way the account service does"""
    payload = {
        'user_id': user_id,
        'exp': datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET'], algorithm='HS256')


def _headers(user):
    return {
        'Authorization': f'Bearer {generate_token(user.id)}',
        'Content-Type': 'application/json'
    }


@pytest.fixture
def auth_headers(customer):
    """Generate auth headers with JWT token for the customer"""
    return _headers(customer)


@pytest.fixture
def other_headers(other_customer):
    return _headers(other_customer)


@pytest.fixture
def admin_headers(admin):
    """Generate auth headers with JWT token for the admin"""
    return _headers(admin)


@pytest.fixture
def category(app):
    category = Category(name='Home Cleaning', is_active=True)
    db.session.add(category)
    db.session.commit()
    return category


@pytest.fixture
def service_factory(category):
    """Factory for catalog services"""
    def _create_service(**kwargs):
        defaults = {
            'name': 'Sofa Cleaning',
            'category_id': category.id,
            'unit_type': 'per_unit',
            'base_price': 100,
            'is_active': True,
        }
        defaults.update(kwargs)

        service = Service(**defaults)
        db.session.add(service)
        db.session.commit()
        return service

    return _create_service


@pytest.fixture
def service(service_factory):
    """per_unit service at 100 AED per unit"""
    return service_factory()


@pytest.fixture
def banner_factory(app):
    def _create_banner(service, discount_percentage, **kwargs):
        banner = Banner(service_id=service.id, discount_percentage=discount_percentage, **kwargs)
        db.session.add(banner)
        db.session.commit()
        return banner

    return _create_banner


@pytest.fixture
def vendor_factory(service):
    """Factory for vendors; approved and matching ``service`` by default"""
    def _create_vendor(**kwargs):
        defaults = {
            'first_name': 'Khalid',
            'last_name': 'Rahman',
            'email': f'vendor_{datetime.now().timestamp()}@example.com',
            'phone': '+971551112222',
            'approved': True,
            'blocked': False,
            'service_id': service.id,
            'availability_schedule': [],
            'unavailable_dates': [],
        }
        defaults.update(kwargs)

        vendor = Vendor(**defaults)
        db.session.add(vendor)
        db.session.commit()
        return vendor

    return _create_vendor


@pytest.fixture
def request_payload(customer, service):
    """Builds a valid public submission body for ``service``"""
    def _payload(**kwargs):
        payload = {
            'user_name': customer.name,
            'user_email': customer.email,
            'user_phone': customer.phone,
            'address': 'Villa 12, Jumeirah 1, Dubai',
            'service_id': service.id,
            'category_id': service.category_id,
            'request_type': 'Scheduled',
            'requested_date': future_iso(),
            'number_of_units': 3,
            'payment_method': 'Cash On Delivery',
        }
        payload.update(kwargs)
        return payload

    return _payload


@pytest.fixture
def request_factory(request_payload):
    """Creates service requests through the orchestrator"""
    def _create_request(admin_id=None, **kwargs):
        return request_service.submit_request(request_payload(**kwargs), admin_id=admin_id)

    return _create_request


@pytest.fixture
def when():
    """Date helpers: ``when.future(days=..)`` and ``when.next_weekday_at(weekday, hour)``"""
    return SimpleNamespace(future=future_iso, next_weekday_at=next_weekday_at)
