#!/usr/bin/env python3

"""ABO dialect of CSOB CZ, which carries the currency of every 075 record."""

from __future__ import annotations

from collections.abc import Mapping

from beancount_import_abo.parser import ABOParser
from beancount_import_abo.processors import CurrencyOverlay

CSOB_CZ_CURRENCIES: Mapping[str, str] = {
    "00036": "AUD",
    "00124": "CAD",
    "00156": "CNY",
    "00203": "CZK",
    "00208": "DKK",
    "00978": "EUR",
    "00826": "GBP",
    "00191": "HRK",
    "00348": "HUF",
    "00756": "CHF",
    "00392": "JPY",
    "00578": "NOK",
    "00985": "PLN",
    "00946": "RON",
    "00643": "RUB",
    "00752": "SEK",
    "00949": "TRY",
    "00840": "USD",
}


def make_overlays(currencies: Mapping[str, str] = CSOB_CZ_CURRENCIES):
    return (CurrencyOverlay(table=currencies),)


def make_parser(currencies: Mapping[str, str] = CSOB_CZ_CURRENCIES) -> ABOParser:
    return ABOParser(overlays=make_overlays(currencies))
