import pytest

from product_preview.layers.price import normalize_price


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", "1234.56"),
        ("1,234.56", "1234.56"),
        ("1234", "1234"),
        ("kr 999", "999"),
        ("1 234,56 kr", "1234.56"),
        ("$ 49.99", "49.99"),
        ("199.00", "199.00"),
    ],
)
def test_known_formats(raw, expected):
    assert normalize_price(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "Sold out", None])
def test_no_number_returns_none(raw):
    assert normalize_price(raw) is None


def test_repeated_separator_is_thousands_grouping():
    assert normalize_price("1.234.567") == "1234567"
    assert normalize_price("1,234,567") == "1234567"


def test_single_separator_with_three_digit_tail_is_grouping():
    assert normalize_price("1.234") == "1234"
    assert normalize_price("12,500") == "12500"


def test_single_separator_with_short_tail_is_decimal():
    assert normalize_price("12,5") == "12.5"
    assert normalize_price("NOK 1299,90") == "1299.90"


def test_trailing_separator_is_not_part_of_number():
    assert normalize_price("Price: 350,-") == "350"


def test_first_number_wins():
    assert normalize_price("Now 79,00 was 99,00") == "79.00"


def test_is_idempotent():
    for raw in ["1.234,56", "kr 999", "12,5", "Sold out"]:
        assert normalize_price(raw) == normalize_price(raw)
    assert normalize_price(normalize_price("1.234,56")) == "1234.56"


def test_only_ascii_digits_count():
    assert normalize_price("１２３ kr") is None
    assert normalize_price("１２３ kr 45") == "45"
