"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from budgetseries.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1500", Decimal("1500.00")),
        ("$1,500.50", Decimal("1500.50")),
        (" 99.999 ", Decimal("100.00")),
        ("0.005", Decimal("0.01")),
        ("-20", Decimal("-20.00")),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", ["", "   ", "abc", "NaN", "Infinity"])
def test_parse_amount_invalid(value):
    with pytest.raises(ValueError):
        parse_amount(value)
