#!/usr/bin/env python3

from datetime import datetime
from decimal import Decimal

import pytest

from beancount_import_abo import fields
from beancount_import_abo.errors import DecodeError


@pytest.mark.parametrize(
    "raw, expected",
    [("0000000", ""), ("0000123", "123"), ("1230000", "1230000"), ("", "")],
)
def test_strip_leading_zeros(raw, expected):
    assert fields.strip_leading_zeros(raw) == expected


def test_trim_trailing_keeps_inner_and_leading_spaces():
    assert fields.trim_trailing("  Tran 1       ") == "  Tran 1"


def test_extract():
    line = "0741234561234567890"
    assert fields.extract(line, 0, 3) == "074"
    assert fields.extract(line, 3, 6) == "123456"
    assert fields.extract(line, 9) == "1234567890"
    assert fields.extract(line, 15, 10) == "7890"


@pytest.mark.parametrize(
    "digits, sign, expected",
    [
        ("000000010000", "+", Decimal("100.00")),
        ("000000010000", "-", Decimal("-100.00")),
        ("00000000000001", "+", Decimal("0.01")),
        ("00000000000000", "-", Decimal("0")),
        ("12345678901234", "+", Decimal("123456789012.34")),
        ("000000010000", " ", Decimal("100.00")),
    ],
)
def test_parse_amount(digits, sign, expected):
    assert fields.parse_amount(digits, sign) == expected


def test_parse_amount_keeps_two_fraction_digits():
    assert str(fields.parse_amount("000000010000", "+")) == "100.00"


@pytest.mark.parametrize(
    "digits", ["0000000100 0", "00000001000x", "-00000010000", ""]
)
def test_parse_amount_rejects_malformed(digits):
    with pytest.raises(DecodeError) as excinfo:
        fields.parse_amount(digits, "+", field="balance")
    assert excinfo.value.field == "balance"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("010114", datetime(2014, 1, 1, 12, 0, 0)),
        ("311299", datetime(1999, 12, 31, 12, 0, 0)),
        ("290268", datetime(2068, 2, 29, 12, 0, 0)),
        ("010169", datetime(1969, 1, 1, 12, 0, 0)),
    ],
)
def test_parse_date(raw, expected):
    assert fields.parse_date(raw) == expected


@pytest.mark.parametrize(
    "raw", ["320114", "011314", "290215", "000000", " 10114", "0101a4", "01011"]
)
def test_parse_date_rejects_invalid(raw):
    with pytest.raises(DecodeError):
        fields.parse_date(raw, field="date_created")


def test_parse_int():
    assert fields.parse_int("002") == 2
    with pytest.raises(DecodeError):
        fields.parse_int("0 2", field="serial_number")
