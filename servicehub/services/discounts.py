"""
Discount resolution.

The service's own discount wins; otherwise the first active promotional
banner for the service applies.  Quotations and unpriced requests are never
discounted.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from servicehub.models import Banner
from servicehub.services.pricing import round_money, to_decimal

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DiscountedTotal:
    total: Optional[Decimal]
    percentage: Optional[Decimal] = None
    amount: Optional[Decimal] = None

    @property
    def applied(self):
        return self.amount is not None


def discount_percentage_for(service, banner=None):
    """Service discount, falling back to *banner* when the service has none."""
    if service.discount_percentage is not None:
        return to_decimal(service.discount_percentage)
    if banner is not None:
        return to_decimal(banner.discount_percentage)
    return None


def apply_discount(total, percentage):
    """Apply *percentage* to *total* with half-up rounding to 2 decimals."""
    if total is None:
        return DiscountedTotal(None)
    if percentage is None or percentage <= 0 or percentage > HUNDRED:
        return DiscountedTotal(total)
    amount = round_money(total * percentage / HUNDRED)
    return DiscountedTotal(round_money(total - amount), percentage, amount)


def resolve_discount(service, request_type, total):
    """Look up the active discount for *service* and apply it to *total*."""
    if request_type == "Quotation" or total is None:
        return DiscountedTotal(total)
    banner = None
    if service.discount_percentage is None:
        banner = Banner.first_active_for(service.id)
    return apply_discount(total, discount_percentage_for(service, banner))
