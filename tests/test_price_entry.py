"""Tests for the PriceEntry aggregate and its price calculation."""
from datetime import timedelta

import pytest

from pricebook.domain import AlreadyExists, InvalidArgument, NotFound
from pricebook.pricing.domain import (
    SKU,
    AvailabilitySignal,
    BulkTier,
    DiscountReason,
    Money,
    PriceEntry,
    Promotion,
    ScheduledPrice,
)


def _promo(window, name="Sale", percentage=20, type="CLEARANCE", priority=0):
    return Promotion.create(name, type, percentage, *window, priority=priority)


def test_create_with_base_price(entry):
    assert entry.sku == SKU("WIDGET-1")
    assert entry.base_price == Money.from_cents(1000)
    assert entry.promotions == ()


def test_base_price_cannot_be_zero(entry):
    with pytest.raises(InvalidArgument):
        PriceEntry.create(SKU("X"), Money.zero())
    with pytest.raises(InvalidArgument):
        entry.set_base_price(Money.zero())
    assert entry.base_price == Money.from_cents(1000)


def test_entries_are_equal_by_sku():
    assert PriceEntry.create(SKU("a"), Money.from_cents(1)) == PriceEntry.create(SKU("A"), Money.from_cents(2))


def test_no_promotions_and_no_tiers_returns_base_price(entry, high, now):
    result = entry.calculate_price(high, now)
    assert result.final_price == result.base_price == Money.from_cents(1000)
    assert result.applied_discounts == ()
    assert result.total_discount_percentage() == 0


def test_scenario_full_discount_with_high_stock(entry, high, now, window):
    entry.add_promotion(_promo(window))
    result = entry.calculate_price(high, now)
    assert result.final_price.amount_in_cents == 800
    [discount] = result.applied_discounts
    assert (discount.original_percentage, discount.applied_percentage) == (20, 20)
    assert discount.reason is DiscountReason.FULL
    assert discount.reason_text == "Full discount applied"


def test_scenario_halved_discount_with_low_stock(entry, low, now, window):
    entry.add_promotion(_promo(window))
    result = entry.calculate_price(low, now)
    assert result.final_price.amount_in_cents == 900
    [discount] = result.applied_discounts
    assert discount.applied_percentage == 10
    assert discount.reason_text == "Reduced discount: low stock"


def test_scenario_no_discount_when_out_of_stock(entry, out_of_stock, now, window):
    entry.add_promotion(_promo(window))
    result = entry.calculate_price(out_of_stock, now)
    assert result.final_price.amount_in_cents == 1000
    [discount] = result.applied_discounts
    assert discount.original_percentage == 20
    assert discount.applied_percentage == 0
    assert discount.reason_text == "No discount: item out of stock"


def test_out_of_stock_zeroes_every_active_promotion(entry, out_of_stock, now, window):
    entry.add_promotion(_promo(window, "A", 50))
    entry.add_promotion(_promo(window, "B", 100, priority=5))
    result = entry.calculate_price(out_of_stock, now)
    assert [d.applied_percentage for d in result.applied_discounts] == [0, 0]
    assert result.final_price == result.base_price


def test_medium_stock_gets_full_discount(entry, now, window):
    entry.add_promotion(_promo(window))
    result = entry.calculate_price(AvailabilitySignal.create("WIDGET-1", "MEDIUM"), now)
    assert result.final_price.amount_in_cents == 800


def test_low_stock_rounds_at_each_step(now, low, window):
    entry = PriceEntry.create(SKU("W"), Money.from_cents(999))
    entry.add_promotion(_promo(window, "A", 25, priority=2))
    entry.add_promotion(_promo(window, "B", 15, priority=1))
    result = entry.calculate_price(low, now)
    # 999 - round(999 * 12.5%) = 999 - 125 = 874; 874 - round(874 * 7.5%) = 874 - 66 = 808
    assert [d.applied_percentage for d in result.applied_discounts] == [12.5, 7.5]
    assert result.final_price.amount_in_cents == 808


def test_promotions_compound_in_priority_order(entry, high, now, window):
    entry.add_promotion(_promo(window, "Small", 10, priority=1))
    entry.add_promotion(_promo(window, "Big", 50, priority=9))
    result = entry.calculate_price(high, now)
    assert [d.promotion_name for d in result.applied_discounts] == ["Big", "Small"]
    # 1000 -> 500 -> 450, not 1000 - 600
    assert result.final_price.amount_in_cents == 450
    assert result.total_discount_percentage() == 55


def test_promotion_order_is_priority_descending_and_stable(entry, window):
    entry.add_promotion(_promo(window, "first", priority=1))
    entry.add_promotion(_promo(window, "top", priority=7))
    entry.add_promotion(_promo(window, "second", priority=1))
    assert [p.name for p in entry.promotions] == ["top", "first", "second"]


def test_promotion_window_boundaries(entry, high, now):
    entry.add_promotion(Promotion.create("Ending", "CLEARANCE", 10, now - timedelta(days=1), now))
    entry.add_promotion(Promotion.create("Starting", "SEASONAL", 20, now, now + timedelta(days=1)))
    result = entry.calculate_price(high, now)
    assert [d.promotion_name for d in result.applied_discounts] == ["Starting"]
    assert result.final_price.amount_in_cents == 800


def test_duplicate_promotion_fails_even_with_other_percentage(entry, window):
    entry.add_promotion(_promo(window, "Sale", 20))
    with pytest.raises(AlreadyExists):
        entry.add_promotion(_promo(window, "Sale", 35))
    entry.add_promotion(_promo(window, "Sale", 35, type="SEASONAL"))
    assert len(entry.promotions) == 2


def test_remove_promotion(entry, window):
    entry.add_promotion(_promo(window, "Sale"))
    entry.add_promotion(_promo(window, "Other"))
    entry.remove_promotion("Sale")
    assert [p.name for p in entry.promotions] == ["Other"]
    with pytest.raises(NotFound):
        entry.remove_promotion("Sale")


def test_remove_promotion_drops_only_the_first_name_match(entry, window):
    entry.add_promotion(_promo(window, "Sale", 20, type="CLEARANCE", priority=5))
    entry.add_promotion(_promo(window, "Sale", 10, type="SEASONAL"))
    entry.remove_promotion("Sale")
    [remaining] = entry.promotions
    assert remaining.type.value == "SEASONAL"
    entry.remove_promotion("Sale")
    assert entry.promotions == ()
    with pytest.raises(NotFound):
        entry.remove_promotion("Sale")


def test_find_promotion(entry, window):
    entry.add_promotion(_promo(window, "Sale"))
    assert entry.find_promotion("Sale").name == "Sale"
    assert entry.find_promotion("Nope") is None


def test_scenario_latest_triggered_schedule_is_effective_base(high, now):
    entry = PriceEntry.create(SKU("TV-1"), Money.from_cents(50000))
    entry.schedule_base_price(ScheduledPrice.create(Money.from_cents(45000), now + timedelta(days=1)))
    entry.schedule_base_price(ScheduledPrice.create(Money.from_cents(40000), now - timedelta(days=1)))
    assert [s.price.amount_in_cents for s in entry.scheduled_prices] == [40000, 45000]

    result = entry.calculate_price(high, now)
    assert result.base_price.amount_in_cents == 40000
    assert result.final_price.amount_in_cents == 40000
    assert entry.base_price.amount_in_cents == 50000

    later = entry.calculate_price(high, now + timedelta(days=2))
    assert later.base_price.amount_in_cents == 45000


def test_schedules_are_not_deduplicated(entry, now):
    scheduled = ScheduledPrice.create(Money.from_cents(700), now)
    entry.schedule_base_price(scheduled)
    entry.schedule_base_price(scheduled)
    assert len(entry.scheduled_prices) == 2


def _standard_tiers(entry):
    entry.set_bulk_tiers(
        [
            BulkTier.create(50, 10),
            BulkTier.create(1, 0, max_quantity=9),
            BulkTier.create(10, 5, max_quantity=49),
        ]
    )


def test_tiers_are_sorted_ascending(entry):
    _standard_tiers(entry)
    assert [t.min_quantity for t in entry.bulk_tiers] == [1, 10, 50]


def test_scenario_bulk_tier_stacks_with_promotion(entry, high, now, window):
    _standard_tiers(entry)
    entry.add_promotion(_promo(window, "Sale", 20))
    result = entry.calculate_price(high, now, quantity=50)
    bulk, promo = result.applied_discounts
    assert bulk.promotion_name == "Bulk discount (50+ units)"
    assert bulk.applied_percentage == 10
    assert bulk.reason is DiscountReason.BULK_TIER
    assert bulk.reason_text == "Bulk tier discount applied"
    assert promo.promotion_name == "Sale"
    # 1000 -> 900 -> 720
    assert result.final_price.amount_in_cents == 720


def test_zero_percent_tier_records_nothing(entry, high, now):
    _standard_tiers(entry)
    result = entry.calculate_price(high, now, quantity=3)
    assert result.applied_discounts == ()


def test_bulk_tier_ignores_availability(entry, out_of_stock, now):
    _standard_tiers(entry)
    result = entry.calculate_price(out_of_stock, now, quantity=12)
    assert result.final_price.amount_in_cents == 950


def test_overlapping_tiers_take_the_last_match(entry, high, now):
    entry.set_bulk_tiers([BulkTier.create(1, 2), BulkTier.create(5, 7), BulkTier.create(3, 4)])
    assert entry.applicable_tier(6).min_quantity == 5
    assert entry.applicable_tier(4).min_quantity == 3
    assert entry.calculate_price(high, now, quantity=6).final_price.amount_in_cents == 930


def test_tiers_skipped_without_quantity(entry, high, now):
    _standard_tiers(entry)
    assert entry.calculate_price(high, now).applied_discounts == ()


def test_set_bulk_tiers_replaces_wholesale(entry):
    _standard_tiers(entry)
    entry.set_bulk_tiers([BulkTier.create(100, 15)])
    assert [t.min_quantity for t in entry.bulk_tiers] == [100]


@pytest.mark.parametrize("quantity", [0, -3, 2.5])
def test_quantity_must_be_positive_integer(entry, high, now, quantity):
    with pytest.raises(InvalidArgument):
        entry.calculate_price(high, now, quantity=quantity)
