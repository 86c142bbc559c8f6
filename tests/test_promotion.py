"""Tests for Promotion, BulkTier and ScheduledPrice."""
from datetime import datetime, timedelta, timezone

import pytest

from pricebook.domain import InvalidArgument
from pricebook.pricing.domain import BulkTier, Money, Promotion, PromotionType, ScheduledPrice


def test_create_promotion(window):
    start, end = window
    promo = Promotion.create("Autumn", "seasonal", 15, start, end, priority=3)
    assert promo.type is PromotionType.SEASONAL
    assert promo.discount_percentage == 15
    assert promo.priority == 3


def test_priority_defaults_to_zero(window):
    assert Promotion.create("Autumn", PromotionType.SEASONAL, 15, *window).priority == 0


@pytest.mark.parametrize(
    "name, percentage",
    [("", 10), ("   ", 10), ("Sale", -1), ("Sale", 101)],
)
def test_create_rejects_bad_name_or_percentage(window, name, percentage):
    with pytest.raises(InvalidArgument):
        Promotion.create(name, "CLEARANCE", percentage, *window)


def test_create_rejects_unknown_type(window):
    with pytest.raises(InvalidArgument):
        Promotion.create("Sale", "CYBER_MONDAY", 10, *window)


def test_valid_from_must_precede_valid_until(now):
    with pytest.raises(InvalidArgument):
        Promotion.create("Sale", "CLEARANCE", 10, now, now)
    with pytest.raises(InvalidArgument):
        Promotion.create("Sale", "CLEARANCE", 10, now, now - timedelta(seconds=1))


def test_active_window_is_half_open(now):
    promo = Promotion.create("Sale", "CLEARANCE", 10, now, now + timedelta(hours=1))
    assert promo.is_active_at(now)
    assert promo.is_active_at(now + timedelta(minutes=59))
    assert not promo.is_active_at(now + timedelta(hours=1))
    assert not promo.is_active_at(now - timedelta(microseconds=1))


def test_iso_strings_and_naive_datetimes_are_utc():
    promo = Promotion.create("Sale", "CLEARANCE", 10, "2026-10-01T00:00:00Z", datetime(2026, 11, 1))
    assert promo.valid_from == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert promo.valid_until.tzinfo is not None


def test_equality_is_by_name_and_type(window):
    a = Promotion.create("Sale", "CLEARANCE", 10, *window)
    b = Promotion.create("Sale", "CLEARANCE", 40, *window, priority=9)
    c = Promotion.create("Sale", "SEASONAL", 10, *window)
    assert a.equals(b) and a == b
    assert not a.equals(c)
    assert len({a, b, c}) == 2


def test_bulk_tier_range():
    tier = BulkTier.create(10, 5, max_quantity=49)
    assert not tier.applies_to(9)
    assert tier.applies_to(10)
    assert tier.applies_to(49)
    assert not tier.applies_to(50)
    assert BulkTier.create(50, 10).applies_to(10_000)
    assert tier.label == "Bulk discount (10+ units)"


@pytest.mark.parametrize(
    "min_quantity, percentage, max_quantity",
    [(0, 5, None), (10, 5, 9), (1, 101, None), (1, -5, None), (1.5, 5, None)],
)
def test_bulk_tier_validation(min_quantity, percentage, max_quantity):
    with pytest.raises(InvalidArgument):
        BulkTier.create(min_quantity, percentage, max_quantity)


def test_scheduled_price_effective_from_its_date(now):
    scheduled = ScheduledPrice.create(Money.from_cents(500), now)
    assert scheduled.is_effective_at(now)
    assert scheduled.is_effective_at(now + timedelta(days=1))
    assert not scheduled.is_effective_at(now - timedelta(seconds=1))


def test_scheduled_price_cannot_be_zero(now):
    with pytest.raises(InvalidArgument):
        ScheduledPrice.create(Money.zero(), now)
