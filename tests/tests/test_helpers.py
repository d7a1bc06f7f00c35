#!/usr/bin/env python3
"""Techem wM-Bus - Test the field codecs."""

from datetime import datetime as dt, timedelta as td

import pytest

from techem_wmbus.const import Unit
from techem_wmbus.exceptions import DateInvalid, DecodeError, PayloadTooShort
from techem_wmbus.helpers import (
    bytes_from_current_date,
    bytes_from_int,
    bytes_from_past_date,
    bytes_from_temperature,
    hex_from_past_date,
    parse_current_date,
    parse_int,
    parse_past_date,
    parse_temperature,
    scale_value,
)
from techem_wmbus.records import Quantity

from .helpers import assert_raises


def test_parse_int() -> None:
    buffer = bytes.fromhex("A0B30100")

    assert parse_int(buffer, 0, width=1) == 0xA0
    assert parse_int(buffer, 1) == 435
    assert parse_int(buffer, 1, width=3) == 435
    assert parse_int(buffer, 1, byteorder="big") == 0xB301

    assert_raises(PayloadTooShort, parse_int, buffer, 3)
    assert_raises(PayloadTooShort, parse_int, buffer, 4, 1)
    assert_raises(PayloadTooShort, parse_int, buffer, -1)

    for val in (0, 1, 0xFF, 0x1234, 0xFFFF):
        assert parse_int(bytes_from_int(val), 0) == val
        assert parse_int(bytes_from_int(val, 3, "big"), 0, 3, "big") == val


def test_scale_value() -> None:
    assert scale_value(435, 0.1) == 43.5
    assert scale_value(181, 0.1) == 18.1
    assert scale_value(2152, 0.01) == 21.52
    assert scale_value(1999) == 1999.0
    assert scale_value(7, 2) == 14.0

    for scale in (0.3, 0, -0.1):
        with pytest.raises(ValueError):
            scale_value(100, scale)


def test_parse_temperature() -> None:
    buffer = bytes.fromhex("68084509")

    assert parse_temperature(buffer, 0) == Quantity(21.52, Unit.CELSIUS)
    assert parse_temperature(buffer, 2) == Quantity(23.73, Unit.CELSIUS)
    assert str(parse_temperature(buffer, 0)) == "21.52 °C"

    for tmp in (0.0, 0.01, 15.36, 21.0, 23.13, 100.5, 655.35):
        assert parse_temperature(bytes_from_temperature(tmp), 0).value == tmp

    assert parse_temperature(bytes.fromhex("3408"), 0).value == 21.0  # not 2.1, 210.0
    assert bytes_from_temperature(21.52) == bytes.fromhex("6808")


def test_parse_past_date() -> None:
    assert parse_past_date(bytes.fromhex("9F23"), 0) == dt(2017, 12, 31)
    assert parse_past_date(bytes.fromhex("DE24"), 0) == dt(2018, 6, 30)
    assert hex_from_past_date(dt(2017, 12, 31)) == "9F23"

    for date in (dt(2000, 1, 1), dt(2020, 2, 29), dt(2127, 12, 31)):
        assert parse_past_date(bytes_from_past_date(date), 0) == date

    with pytest.raises(ValueError):
        bytes_from_past_date(dt(1999, 12, 31))



def test_dates_round_trip() -> None:
    """Every date of the 7-bit year range survives an encode/decode."""

    date = dt(2000, 1, 1)
    while date <= dt(2127, 12, 31):
        assert parse_past_date(bytes_from_past_date(date), 0) == date
        assert (
            parse_current_date(bytes_from_current_date(date), 0, after=date - td(1))
            == date
        )
        date += td(1)


def test_parse_past_date_invalid() -> None:
    def word(year: int, month: int, day: int) -> bytes:
        return bytes_from_int((year << 9) | (month << 5) | day)

    assert_raises(DateInvalid, parse_past_date, word(17, 12, 0), 0)  # day 0
    assert_raises(DateInvalid, parse_past_date, word(17, 0, 1), 0)  # month 0
    assert_raises(DateInvalid, parse_past_date, word(17, 13, 1), 0)  # month 13
    assert_raises(DateInvalid, parse_past_date, word(17, 2, 30), 0)  # 30 Feb
    assert_raises(DateInvalid, parse_past_date, word(19, 2, 29), 0)  # 29 Feb 2019

    with pytest.raises(DecodeError) as exc_info:
        parse_past_date(bytes.fromhex("0000"), 0)
    assert "hint:" in str(exc_info.value)


def test_parse_current_date() -> None:
    after = dt(2017, 12, 31)

    assert parse_current_date(bytes.fromhex("D016"), 0, after=after) == dt(
        2018, 11, 13
    )
    assert parse_current_date(bytes.fromhex("E016"), 0, after=after) == dt(
        2018, 11, 14
    )
    assert parse_current_date(bytes.fromhex("586F"), 0, after=dt(2018, 6, 30)) == dt(
        2018, 7, 21
    )

    assert bytes_from_current_date(dt(2018, 11, 14)) == bytes.fromhex("E016")


def test_parse_current_date_year() -> None:
    """The current date has no year: it is the first such date after the past date."""

    def current(date: dt, after: dt) -> dt:
        return parse_current_date(bytes_from_current_date(date), 0, after=after)

    # later in the same year
    assert current(dt(2018, 7, 21), dt(2018, 6, 30)) == dt(2018, 7, 21)
    # earlier in the year, so it's next year
    assert current(dt(2018, 1, 5), dt(2017, 12, 31)) == dt(2018, 1, 5)
    # the same day, so it's next year
    assert current(dt(2018, 12, 31), dt(2017, 12, 31)) == dt(2018, 12, 31)
    # 29 Feb is in the next leap year
    assert current(dt(2020, 2, 29), dt(2019, 3, 1)) == dt(2020, 2, 29)
    assert current(dt(2020, 2, 29), dt(2020, 2, 29)) == dt(2024, 2, 29)


def test_parse_current_date_invalid() -> None:
    after = dt(2017, 12, 31)

    def word(month: int, day: int) -> bytes:
        return bytes_from_int((month << 9) | (day << 4))

    def parse(buffer: bytes) -> dt:
        return parse_current_date(buffer, 0, after=after)

    assert_raises(DateInvalid, parse, word(11, 0))
    assert_raises(DateInvalid, parse, word(0, 13))
    assert_raises(DateInvalid, parse, word(13, 13))
    assert_raises(DateInvalid, parse, word(4, 31))  # 31 Apr
    assert_raises(PayloadTooShort, parse, b"\xd0")
