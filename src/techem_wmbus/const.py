#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames."""

from __future__ import annotations

import re
from enum import IntEnum, StrEnum
from typing import Final

DEFAULT_RSSI: Final[int] = 0

# the wireless link layer: L-field, C-field, then the 8-byte secondary address
SZ_L_FIELD_LEN: Final[int] = 1
SZ_C_FIELD_LEN: Final[int] = 1
ADDRESS_OFFSET: Final[int] = SZ_L_FIELD_LEN + SZ_C_FIELD_LEN
ADDRESS_LEN: Final[int] = 8

# the two bit-packed dates count their years from here
DATE_BASE_YEAR: Final[int] = 2000

DEVICE_ID_REGEX = re.compile(r"^[0-9A-F]{8}$")  # usu. BCD digits only
MANUFACTURER_REGEX = re.compile(r"^[A-Z@]{3}$")
FRAME_HEX_REGEX = re.compile(r"^([0-9A-F]{2})+$")


# used by config schemas...
SZ_DISABLED_DECODERS: Final = "disabled_decoders"
SZ_ENFORCE_KNOWN_LIST: Final = "enforce_known_list"
SZ_KNOWN_LIST: Final = "known_list"
SZ_LOG_LEVEL: Final = "log_level"

# used by the CLI & records_as_dict()...
SZ_DEVICE_ID: Final = "device_id"
SZ_DECODER: Final = "decoder"
SZ_ERROR: Final = "error"
SZ_MANUFACTURER: Final = "manufacturer"
SZ_RECORDS: Final = "records"
SZ_RSSI: Final = "rssi"
SZ_STATUS: Final = "status"
SZ_DEVICE_TYPE: Final = "device_type"
SZ_VERSION: Final = "version"


class RecordType(StrEnum):
    """The kinds of reading a Techem frame can carry (a closed set)."""

    CURRENT_VOLUME = "current_volume"
    CURRENT_READING_DATE = "current_reading_date"
    PAST_VOLUME = "past_volume"
    PAST_READING_DATE = "past_reading_date"
    ROOM_TEMPERATURE = "room_temperature"
    RADIATOR_TEMPERATURE = "radiator_temperature"
    RSSI = "rssi"


class Unit(StrEnum):
    CELSIUS = "°C"
    CUBIC_METRE = "m³"
    HCA_UNITS = "units"  # heat cost allocator units, dimensionless


class Manufacturer(StrEnum):
    TCH = "TCH"  # Techem


class DeviceType(IntEnum):
    HEAT_COST_ALLOCATOR = 0x08  # EN 13757-3
    TCH_HCA = 0x80  # .           Techem proprietary
    TCH_HCA_V118 = 0xF0
    TCH_WARM_WATER = 0x62
    TCH_COLD_WATER = 0x72


class Coding(IntEnum):
    """The CI-field values that select a frame's sub-layout."""

    HCA = 0xA0
    WATER = 0xA2  # also used by the v94 allocators
