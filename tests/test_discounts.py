"""
Discount resolution tests
"""
from decimal import Decimal

from servicehub.services.discounts import apply_discount, resolve_discount


class TestApplyDiscount:

    def test_ten_percent_of_three_hundred(self):
        result = apply_discount(Decimal('300'), Decimal('10'))

        assert result.amount == Decimal('30.00')
        assert result.total == Decimal('270.00')
        assert result.applied

    def test_rounds_half_up_to_cents(self):
        result = apply_discount(Decimal('99.99'), Decimal('12.5'))

        assert result.amount == Decimal('12.50')
        assert result.total == Decimal('87.49')

    def test_resolving_twice_from_the_same_total_is_stable(self):
        first = apply_discount(Decimal('245.50'), Decimal('15'))
        second = apply_discount(Decimal('245.50'), Decimal('15'))

        assert first == second

    def test_zero_percent_is_not_applied(self):
        result = apply_discount(Decimal('300'), Decimal('0'))

        assert result.total == Decimal('300')
        assert not result.applied

    def test_no_total_means_no_discount(self):
        assert apply_discount(None, Decimal('10')).total is None


class TestResolveDiscount:
    """Service discount vs promotional banners"""

    def test_banner_applies_when_service_has_no_discount(self, service, banner_factory):
        banner_factory(service, 10)

        result = resolve_discount(service, 'Scheduled', Decimal('300'))

        assert result.total == Decimal('270.00')
        assert result.percentage == Decimal('10')

    def test_service_discount_wins_over_banner(self, service_factory, banner_factory):
        service = service_factory(discount_percentage=15)
        banner_factory(service, 10)

        result = resolve_discount(service, 'Scheduled', Decimal('200'))

        assert result.amount == Decimal('30.00')

    def test_explicit_zero_service_discount_blocks_banner(self, service_factory, banner_factory):
        service = service_factory(discount_percentage=0)
        banner_factory(service, 10)

        result = resolve_discount(service, 'Scheduled', Decimal('200'))

        assert not result.applied

    def test_first_active_banner_by_sort_order(self, service, banner_factory):
        banner_factory(service, 20, sort_order=2)
        banner_factory(service, 5, sort_order=1)
        banner_factory(service, 50, sort_order=0, is_active=False)

        result = resolve_discount(service, 'OnTime', Decimal('100'))

        assert result.percentage == Decimal('5')

    def test_quotation_is_never_discounted(self, service, banner_factory):
        banner_factory(service, 10)

        result = resolve_discount(service, 'Quotation', Decimal('300'))

        assert result.total == Decimal('300')
        assert not result.applied
