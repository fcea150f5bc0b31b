"""
Helper utilities
"""
from datetime import datetime, date, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo


def format_currency(amount, currency='AED'):
    """
    Format amount as currency

    Args:
        amount: Numeric amount
        currency (str): Currency code

    Returns:
        str: Formatted currency string
    """
    if isinstance(amount, (Decimal, float, int)):
        return f'{float(amount):,.2f} {currency}'

    return str(amount)


def parse_date(date_string, format='%Y-%m-%d'):
    """
    Parse date string to date object

    Args:
        date_string (str): Date string
        format (str): strptime format string

    Returns:
        date: Date object or None if invalid
    """
    try:
        return datetime.strptime(date_string, format).date()
    except (ValueError, TypeError):
        return None


def parse_datetime(value, timezone_name='UTC'):
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime

    Values without an offset are read as wall-clock time in *timezone_name*.

    Args:
        value (str): ISO string such as ``2026-03-02T10:00:00Z``
        timezone_name (str): IANA zone for offset-less values

    Returns:
        datetime: UTC datetime or None if invalid
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(timezone_name))
    return parsed.astimezone(timezone.utc)


def to_db_datetime(value):
    """Strip tzinfo from a UTC datetime for storage in naive columns."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def short_id(value):
    return str(value)[:8] if value else 'N/A'
