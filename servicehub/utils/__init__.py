"""Utilities package"""
from .validators import validate_email, validate_phone, normalize_payment_method, is_positive_int
from .helpers import format_currency, parse_date, parse_datetime, to_db_datetime, short_id

__all__ = [
    'validate_email',
    'validate_phone',
    'normalize_payment_method',
    'is_positive_int',
    'format_currency',
    'parse_date',
    'parse_datetime',
    'to_db_datetime',
    'short_id',
]
