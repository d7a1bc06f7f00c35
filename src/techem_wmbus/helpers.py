#!/usr/bin/env python3
"""Techem wM-Bus - field codecs (integers, temperatures & bit-packed dates).

All the fields are little-endian on the wire. The two dates are 16-bit words:

    past (billing) date:  yyyyyyym mmmddddd    year = 2000 + y (0..127)
    current date:         ...mmmmd dddd....    no year (it follows the past date)
"""

from __future__ import annotations

from datetime import datetime as dt
from typing import Final, Literal

from . import exceptions as exc
from .const import DATE_BASE_YEAR, Unit
from .records import Quantity

ByteOrderT = Literal["little", "big"]

DEFAULT_TEMP_SCALE: Final[float] = 0.01  # hundredths of a degree
DATE_WIDTH: Final[int] = 2

# the current date has no year, but is always within a year of the past date
_MAX_YEARS_AHEAD: Final[int] = 4  # allows for 29 Feb


def _check_length(buffer: bytes, offset: int, width: int) -> None:
    if offset < 0 or len(buffer) < offset + width:
        raise exc.PayloadTooShort(
            f"Need {width} byte(s) at offset {offset}, but buffer is {len(buffer)} bytes"
        )


def scale_divisor(scale: float) -> int:
    """Return the integer divisor for a scale such as 0.1 or 0.01."""
    if scale <= 0:
        raise ValueError(f"Invalid scale: {scale}, is not positive")
    divisor = round(1 / scale)
    if divisor < 1 or abs(divisor * scale - 1) > 1e-9:
        raise ValueError(f"Invalid scale: {scale}, is not 1/n")
    return divisor


def scale_value(raw: int, scale: float = 1) -> float:
    """Apply a device scaling (e.g. 0.1) to a raw (integer) field."""
    if scale >= 1:
        return float(raw * scale)
    return raw / scale_divisor(scale)  # NB: 2100 / 100 is exact, 2100 * 0.01 isn't


def parse_int(
    buffer: bytes, offset: int, width: int = 2, byteorder: ByteOrderT = "little"
) -> int:
    """Return the unsigned integer of width bytes at offset."""
    _check_length(buffer, offset, width)
    return int.from_bytes(buffer[offset : offset + width], byteorder)


def parse_temperature(
    buffer: bytes, offset: int, width: int = 2, scale: float = DEFAULT_TEMP_SCALE
) -> Quantity:
    """Return the (unsigned, fixed point) temperature at offset, in Celsius."""
    return Quantity(scale_value(parse_int(buffer, offset, width), scale), Unit.CELSIUS)


def _to_date(year: int, month: int, day: int, word: int) -> dt:
    if not (1 <= day <= 31 and 1 <= month <= 12):
        raise exc.DateInvalid(
            f"Invalid date: 0x{word:04X} (day={day}, month={month}, year={year})"
        )
    try:
        return dt(year, month, day)
    except ValueError as err:  # e.g. 31 Feb
        raise exc.DateInvalid(f"Invalid date: 0x{word:04X} ({err})") from err


def parse_past_date(buffer: bytes, offset: int) -> dt:
    """Return the past (billing period) reading date at offset."""

    word = parse_int(buffer, offset, DATE_WIDTH)

    day = word & 0x1F
    month = (word >> 5) & 0x0F
    year = DATE_BASE_YEAR + (word >> 9)  # 7 bits

    return _to_date(year, month, day, word)


def parse_current_date(buffer: bytes, offset: int, *, after: dt) -> dt:
    """Return the current reading date at offset.

    The field has no year, so it is the first date strictly after the (past) date.
    """

    word = parse_int(buffer, offset, DATE_WIDTH)

    day = (word >> 4) & 0x1F
    month = (word >> 9) & 0x0F

    if not (1 <= day <= 31 and 1 <= month <= 12):
        return _to_date(after.year, month, day, word)  # will raise DateInvalid

    for year in range(after.year, after.year + _MAX_YEARS_AHEAD + 1):
        try:
            result = dt(year, month, day)
        except ValueError:  # not a leap year, or 31 Apr
            continue
        if result > after:
            return result

    raise exc.DateInvalid(f"Invalid date: 0x{word:04X} (day={day}, month={month})")


########################################################################################
# Encoders, the inverse of the above (used by tests & tools)


def bytes_from_int(
    value: int, width: int = 2, byteorder: ByteOrderT = "little"
) -> bytes:
    return value.to_bytes(width, byteorder)


def bytes_from_temperature(
    value: float, width: int = 2, scale: float = DEFAULT_TEMP_SCALE
) -> bytes:
    """Convert (say) 21.0 into b'\\x34\\x08'."""
    return bytes_from_int(round(value * scale_divisor(scale)), width)


def bytes_from_past_date(value: dt) -> bytes:
    year = value.year - DATE_BASE_YEAR
    if not 0 <= year <= 0x7F:
        raise ValueError(f"Invalid value: {value}, year is out of range")
    return bytes_from_int((year << 9) | (value.month << 5) | value.day, DATE_WIDTH)


def bytes_from_current_date(value: dt) -> bytes:
    return bytes_from_int((value.month << 9) | (value.day << 4), DATE_WIDTH)


def hex_from_past_date(value: dt) -> str:
    """Convert (say) 2017-12-31 into '9F23'."""
    return bytes_from_past_date(value).hex().upper()
