"""Tests for money parsing and arithmetic."""

from decimal import Decimal

import pytest

from tillbook.domain.errors import ValidationError
from tillbook.utils.money import MAX_MONEY, divide_money, format_money, parse_amount, sum_money, to_money


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", "123.45"),
        ("Rp 15000", "15000"),
        ("rp. 1,234.56", "1234.56"),
        ("-50.00", "-50.00"),
        ("(75.25)", "-75.25"),
        ("$ 9.99", "9.99"),
    ],
)
def test_parse_amount(text, expected):
    """Amount strings in common formats."""
    assert parse_amount(text) == Decimal(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "12..5", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Unparseable or non-finite amounts raise ValidationError."""
    with pytest.raises(ValidationError):
        parse_amount(text)


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("1.5"), Decimal("1.50")),
        (10, Decimal("10.00")),
        (0.1, Decimal("0.10")),
        ("2.30", Decimal("2.30")),
        ("10.000", Decimal("10.00")),
        (Decimal("1E+2"), Decimal("100.00")),
    ],
)
def test_to_money(value, expected):
    """Values are quantized to cents."""
    result = to_money(value)
    assert result == expected
    assert result.as_tuple().exponent == -2


@pytest.mark.parametrize("value", [Decimal("0.001"), "1.999", 0.125, True, None, [1]])
def test_to_money_rejects(value):
    """Sub-cent precision and non-numbers are rejected."""
    with pytest.raises(ValidationError):
        to_money(value, "price")


def test_sum_money_is_exact():
    """Ten thousand cents add up to exactly one hundred."""
    assert sum_money(Decimal("0.01") for _ in range(10_000)) == Decimal("100.00")
    assert sum_money([]) == Decimal("0.00")


def test_divide_money():
    """Division rounds half up and tolerates a zero count."""
    assert divide_money(Decimal("10.00"), 3) == Decimal("3.33")
    assert divide_money(Decimal("0.05"), 2) == Decimal("0.03")
    assert divide_money(Decimal("10.00"), 0) == Decimal("0.00")


def test_format_money():
    """Amounts are shown with thousands separators and two decimals."""
    assert format_money(Decimal("1234567.5")) == "1,234,567.50"
    assert format_money(Decimal("-2.5")) == "-2.50"


def test_to_money_accepts_largest_storable_amount():
    """The column limit itself is accepted in both signs."""
    assert to_money("9999999999.99") == MAX_MONEY
    assert to_money("-9999999999.99") == -MAX_MONEY


@pytest.mark.parametrize("value", ["10000000000.00", "12345678901234567.89", Decimal("-1E+30"), 1e20])
def test_to_money_rejects_amounts_too_large_to_store(value):
    """Amounts the store would round or truncate are rejected up front."""
    with pytest.raises(ValidationError, match="must not exceed"):
        to_money(value, "price")
