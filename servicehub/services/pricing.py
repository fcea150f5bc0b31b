"""
Price resolution for service requests.

A single resolver is shared by every entry point (public submit, admin
submit, customer edit) so the same booking always prices the same way.

Precedence:
  1. Selected sub-services: unit = sum(rate * quantity)
  2. ``per_hour`` with hour/day/month rates: rate * duration * persons
  3. ``per_hour``: exact tier for the number of hours, else base price * hours
  4. ``per_unit``: base price * units

Quotation requests never fail on missing price inputs; they carry a
best-effort unit price and no total.
"""
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional

from servicehub.errors import PricingError, PricingErrorCode
from servicehub.models.base import as_utc

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
DURATION_TYPES = {
    "hours": "per_hour_rate",
    "days": "per_day_rate",
    "months": "per_month_rate",
}


def to_decimal(value):
    """Convert a stored number to Decimal, returning None for blanks."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def round_money(value):
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SubServiceLine:
    """Snapshot of one selected sub-service, copied from the catalog."""
    name: str
    quantity: int
    rate: Decimal
    items: int = 1

    @property
    def amount(self):
        return self.rate * self.quantity

    def to_dict(self):
        return {
            "name": self.name,
            "quantity": self.quantity,
            "rate": float(self.rate),
            "items": self.items,
        }


@dataclass(frozen=True)
class PriceQuote:
    unit_type: str
    unit_price: Optional[Decimal]
    total_price: Optional[Decimal]
    lines: List[SubServiceLine] = field(default_factory=list)
    duration_type: Optional[str] = None
    duration: Optional[int] = None
    number_of_persons: Optional[int] = None

    def line_dicts(self):
        return [line.to_dict() for line in self.lines]


def _as_quantity(raw):
    if raw is None or raw == "":
        return 1
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def resolve_sub_services(service, selections):
    """
    Match requested ``{"name", "quantity"}`` selections against the catalog.

    Returns a list of ``SubServiceLine`` snapshots carrying the catalog's
    spelling of each name, its rate and items-per-unit.
    """
    catalog = service.sub_services or []
    if not catalog:
        raise PricingError(
            PricingErrorCode.SERVICE_NO_SUBSERVICES,
            f'Service "{service.name}" does not offer sub-services',
        )

    by_name = {str(entry.get("name", "")).strip().lower(): entry for entry in catalog}
    lines = []
    for selection in selections:
        name = selection.get("name") if isinstance(selection, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise PricingError(
                PricingErrorCode.INVALID_SUBSERVICE_NAME,
                "Each selected sub-service must have a name",
            )

        entry = by_name.get(name.strip().lower())
        if entry is None:
            raise PricingError(
                PricingErrorCode.SUBSERVICE_NOT_FOUND,
                f'Sub-service "{name.strip()}" is not offered by this service',
            )

        quantity = _as_quantity(selection.get("quantity"))
        max_quantity = entry.get("max")
        if quantity is None or quantity < 1 or (max_quantity is not None and quantity > int(max_quantity)):
            limit = f" (max {max_quantity})" if max_quantity is not None else ""
            raise PricingError(
                PricingErrorCode.INVALID_SUBSERVICE_QUANTITY,
                f'Invalid quantity for sub-service "{entry["name"]}"{limit}',
            )

        lines.append(SubServiceLine(
            name=entry["name"],
            quantity=quantity,
            rate=to_decimal(entry.get("rate")) or ZERO,
            items=int(entry.get("items") or 1),
        ))
    return lines


def find_tier(service, hours):
    """Return the tier whose hours equal *hours* exactly, or None."""
    for tier in service.time_based_pricing or []:
        if tier.get("hours") == hours:
            return tier
    return None


def rate_table(service):
    """Hour/day/month rates keyed by duration type, or None unless all are positive."""
    rates = {}
    for duration_type, attribute in DURATION_TYPES.items():
        rate = to_decimal(getattr(service, attribute, None))
        if rate is None or rate <= 0:
            return None
        rates[duration_type] = rate
    return rates


def _known_duration_type(rates, duration_type):
    return isinstance(duration_type, str) and duration_type in rates


def _rate_quote(service, rates, is_quotation, duration_type, duration, number_of_persons, lines):
    if not _known_duration_type(rates, duration_type):
        raise PricingError(
            PricingErrorCode.INVALID_DURATION_TYPE,
            f"duration_type is required for this service. Must be one of: {', '.join(rates)}",
        )
    duration = _as_quantity(duration or None)
    if duration is None or duration < 1:
        raise PricingError(PricingErrorCode.INVALID_DURATION, "duration must be a positive integer")
    persons = _as_quantity(number_of_persons or None)
    if persons is None or persons < 1:
        raise PricingError(
            PricingErrorCode.INVALID_NUMBER_OF_PERSONS,
            "number_of_persons must be a positive integer",
        )

    rate = rates[duration_type]
    total = None if is_quotation else rate * duration * persons
    return PriceQuote(service.unit_type, rate, total, lines, duration_type, duration, persons)


def resolve_price(service, request_type, number_of_units, selections=None,
                  duration_type=None, duration=None, number_of_persons=None):
    """
    Compute unit and total price for a booking.

    Args:
        service: catalog ``Service`` (or any object with the same attributes)
        request_type (str): Quotation, OnTime or Scheduled
        number_of_units (int): units or hours, already validated positive
        selections (list): optional ``{"name", "quantity"}`` dicts
        duration_type (str): hours, days or months; rate-priced services only
        duration (int): number of hours/days/months, defaults to 1
        number_of_persons (int): staff booked, defaults to 1

    Returns:
        PriceQuote

    Raises:
        PricingError
    """
    is_quotation = request_type == "Quotation"
    units = Decimal(number_of_units)

    lines = resolve_sub_services(service, selections) if selections else []
    if lines:
        unit_price = sum((line.amount for line in lines), ZERO)
        if unit_price > 0:
            total = None if is_quotation else unit_price * units
            return PriceQuote(service.unit_type, unit_price, total, lines)
        if not is_quotation:
            raise PricingError(
                PricingErrorCode.INVALID_SUBSERVICES_PRICING,
                "Selected sub-services do not add up to a payable amount",
            )

    base_price = to_decimal(service.base_price)
    has_base = base_price is not None and base_price > 0

    if service.unit_type == "per_hour":
        rates = rate_table(service)
        if rates is not None and (_known_duration_type(rates, duration_type) or not is_quotation):
            return _rate_quote(service, rates, is_quotation, duration_type, duration, number_of_persons, lines)

        tier = find_tier(service, number_of_units)
        tier_price = to_decimal(tier.get("price")) if tier is not None else None
        if tier_price is not None and tier_price > 0:
            return PriceQuote(service.unit_type, tier_price, None if is_quotation else tier_price, lines)
        if tier is None and has_base:
            return PriceQuote(service.unit_type, base_price, None if is_quotation else base_price * units, lines)
        if is_quotation:
            return PriceQuote(service.unit_type, tier_price, None, lines)
        raise PricingError(
            PricingErrorCode.MISSING_TIME_BASED_TIER,
            f"No package price configured for {number_of_units} hour(s)",
        )

    if service.unit_type == "per_unit":
        if has_base:
            return PriceQuote(service.unit_type, base_price, None if is_quotation else base_price * units, lines)
        if is_quotation:
            return PriceQuote(service.unit_type, None, None, lines)
        raise PricingError(
            PricingErrorCode.INVALID_SERVICE_PRICE,
            "Service price is not configured",
        )

    if is_quotation:
        return PriceQuote(service.unit_type, base_price if has_base else None, None, lines)
    raise PricingError(
        PricingErrorCode.INVALID_UNIT_TYPE,
        f"Unsupported unit type: {service.unit_type}",
    )


def check_advance_notice(service, requested_date, now):
    """Reject dates closer than the service's minimum advance notice."""
    hours = service.min_advance_hours
    if not hours or hours <= 0:
        return
    earliest = as_utc(now) + timedelta(hours=hours)
    if as_utc(requested_date) < earliest:
        logger.warning(
            "Rejected booking for %s: %s is inside the %sh advance window",
            service.id, requested_date, hours,
        )
        raise PricingError(
            PricingErrorCode.INSUFFICIENT_ADVANCE_TIME,
            f"This service must be booked at least {hours} hour(s) in advance",
        )
