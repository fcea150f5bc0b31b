"""
Validation utilities
"""
import re

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^[\+]?[1-9][\d]{0,15}$')

PAYMENT_METHOD_ALIASES = {
    'cash on delivery': 'Cash On Delivery',
    'cod': 'Cash On Delivery',
    'online payment': 'Online Payment',
    'online': 'Online Payment',
}


def validate_email(email):
    """
    Validate email format

    Args:
        email (str): Email address to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not email or not isinstance(email, str):
        return False

    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_phone(phone):
    """
    Validate an international phone number

    Spaces, dashes and parentheses are ignored; an optional leading ``+``
    is followed by up to 16 digits, the first of which is not zero.

    Args:
        phone (str): Phone number to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not phone or not isinstance(phone, str):
        return False

    cleaned = re.sub(r'[\s\-\(\)]', '', phone)
    return bool(PHONE_PATTERN.match(cleaned))


def normalize_payment_method(value):
    """
    Map a client-supplied payment method onto its canonical spelling.

    Returns:
        str: 'Cash On Delivery' or 'Online Payment', or None if unknown
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return 'Cash On Delivery'
    if not isinstance(value, str):
        return None
    return PAYMENT_METHOD_ALIASES.get(' '.join(value.lower().split()))


def is_positive_int(value):
    """True for ints (or integral strings) greater than zero; bools excluded."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip()) > 0
    return False
