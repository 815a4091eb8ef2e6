#!/usr/bin/env python3

"""Fixed-column field decoding for ABO records.

All offsets are 0-based, lengths are in characters.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from beancount_import_abo.errors import DecodeError

DATE_FORMAT = "%d%m%y%H%M%S"
NOON = "120000"


def extract(line: str, start: int, length: int | None = None) -> str:
    if length is None:
        return line[start:]
    return line[start : start + length]


def strip_leading_zeros(raw: str) -> str:
    """`"0000123"` -> `"123"`, `"0000000"` -> `""`."""
    return raw.lstrip("0")


def trim_trailing(raw: str) -> str:
    return raw.rstrip(" ")


def parse_int(raw: str, field: str | None = None) -> int:
    if not raw.isascii() or not raw.isdigit():
        raise DecodeError(f"Expected digits, got {raw!r}", field=field)
    return int(raw)


def parse_amount(digits: str, sign: str, field: str | None = None) -> Decimal:
    """Converts zero padded minor units plus a sign character to a Decimal.

    `"000000010000", "+"` -> `Decimal("100.00")`. Only `-` negates.
    """
    stripped = strip_leading_zeros(digits)
    if stripped and (not stripped.isascii() or not stripped.isdigit()):
        raise DecodeError(f"Malformed amount {digits!r}", field=field)
    if not digits:
        raise DecodeError("Amount is missing", field=field)
    amount = Decimal(int(stripped or "0")).scaleb(-2)
    if sign == "-":
        amount = -amount
    return amount


def parse_date(raw: str, field: str | None = None) -> datetime:
    """Parses `ddmmyy` into a naive datetime at noon.

    Two-digit years follow `%y`: 69-99 map to 19xx, 00-68 to 20xx.
    """
    if len(raw) != 6 or not raw.isascii() or not raw.isdigit():
        raise DecodeError(f"Expected a ddmmyy date, got {raw!r}", field=field)
    try:
        return datetime.strptime(raw + NOON, DATE_FORMAT)
    except ValueError as e:
        raise DecodeError(f"Invalid calendar date {raw!r}", field=field) from e
