#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames.

Works with (amongst others):
- heat cost allocators (FHKV data II/III, v64, v69, v94, v118)
- warm/cold water meters (MK Radio 3, v116)
"""

from __future__ import annotations

import logging

from .address import DeviceSignature, SecondaryAddress
from .const import RecordType, Unit
from .decoders import DEFAULT_DECODERS, FrameDecoder, FrameLayout
from .dispatcher import (
    DecoderRegistry,
    DecodeResult,
    DecodeStatus,
    registry_from_config,
)
from .exceptions import DecodeError, UnknownDeviceType, WMBusException
from .frame import Frame
from .records import Quantity, Record, RecordsT, records_as_dict
from .version import VERSION

__all__ = [
    "VERSION",
    #
    "DEFAULT_DECODERS",
    "DecodeError",
    "DecodeResult",
    "DecodeStatus",
    "DecoderRegistry",
    "DeviceSignature",
    "Frame",
    "FrameDecoder",
    "FrameLayout",
    "Quantity",
    "Record",
    "RecordType",
    "RecordsT",
    "SecondaryAddress",
    "Unit",
    "UnknownDeviceType",
    "WMBusException",
    #
    "records_as_dict",
    "registry_from_config",
]


_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())
