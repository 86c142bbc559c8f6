"""Tests for Money and SKU value objects."""
from decimal import Decimal

import pytest

from pricebook.domain import CurrencyMismatch, InvalidArgument
from pricebook.pricing.domain import SKU, Money


def test_from_cents_normalizes_currency():
    money = Money.from_cents(1999, "usd")
    assert money.amount_in_cents == 1999
    assert money.currency == "USD"


@pytest.mark.parametrize("amount", [-1, 10.5, "100", True, None])
def test_from_cents_rejects_non_integer_or_negative(amount):
    with pytest.raises(InvalidArgument):
        Money.from_cents(amount)


def test_from_dollars_rounds_half_up():
    assert Money.from_dollars("10.005").amount_in_cents == 1001
    assert Money.from_dollars(19.99).amount_in_cents == 1999
    assert Money.from_dollars(0).is_zero()


def test_zero_and_to_dollars():
    assert Money.zero("eur") == Money.from_cents(0, "EUR")
    assert Money.from_cents(1250).to_dollars() == Decimal("12.50")


def test_add_and_subtract():
    a = Money.from_cents(700)
    b = Money.from_cents(300)
    assert a.add(b) == Money.from_cents(1000)
    assert a.subtract(b) == Money.from_cents(400)


def test_subtract_below_zero_fails():
    with pytest.raises(InvalidArgument):
        Money.from_cents(100).subtract(Money.from_cents(101))


def test_cross_currency_operations_fail():
    usd = Money.from_cents(100, "USD")
    eur = Money.from_cents(100, "EUR")
    with pytest.raises(CurrencyMismatch):
        usd.add(eur)
    with pytest.raises(CurrencyMismatch):
        usd.subtract(eur)
    with pytest.raises(CurrencyMismatch):
        usd.is_greater_than(eur)
    assert not usd.equals(eur)


@pytest.mark.parametrize("cents", [1, 999, 1000, 123457])
def test_zero_discount_is_identity_and_full_discount_is_zero(cents):
    money = Money.from_cents(cents)
    assert money.apply_discount(0) == money
    assert money.apply_discount(100).amount_in_cents == 0


def test_apply_discount_rounds_discount_amount_half_up():
    # 12.5% of 1004 = 125.5 -> 126 off
    assert Money.from_cents(1004).apply_discount(12.5).amount_in_cents == 878
    # 10% of 995 = 99.5 -> 100 off
    assert Money.from_cents(995).apply_discount(10).amount_in_cents == 895


def test_multiply_by_percentage():
    assert Money.from_cents(995).multiply_by_percentage(10).amount_in_cents == 100
    assert Money.from_cents(1000).multiply_by_percentage(Decimal("7.5")).amount_in_cents == 75


@pytest.mark.parametrize("percentage", [-0.01, 100.01, float("nan"), "10"])
def test_percentages_outside_range_fail(percentage):
    with pytest.raises(InvalidArgument):
        Money.from_cents(1000).apply_discount(percentage)
    with pytest.raises(InvalidArgument):
        Money.from_cents(1000).multiply_by_percentage(percentage)


def test_money_is_immutable():
    money = Money.from_cents(100)
    with pytest.raises(AttributeError):
        money.amount_in_cents = 5  # type: ignore[misc]


def test_comparisons():
    assert Money.from_cents(2).is_greater_than(Money.from_cents(1))
    assert not Money.from_cents(1).is_greater_than(Money.from_cents(1))


def test_sku_is_trimmed_and_uppercased():
    assert SKU("  abc-12 ").value == "ABC-12"
    assert SKU("abc-12") == SKU("ABC-12")
    assert str(SKU.create("x1")) == "X1"


@pytest.mark.parametrize("raw", ["", "   ", "ABC 12", "abc_12", "ä"])
def test_sku_rejects_malformed_values(raw):
    with pytest.raises(InvalidArgument):
        SKU(raw)
