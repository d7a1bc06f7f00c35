#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames."""

import logging
import warnings
from pathlib import Path
from typing import Any

from techem_wmbus import Frame

warnings.filterwarnings("ignore", category=DeprecationWarning)

logging.disable(logging.WARNING)  # usu. WARNING


TEST_DIR = Path(__file__).resolve().parent

RSSI = 10

# frames as logged by a receiver (each has 3 trailing bytes)
COLD_WATER = "2F446850122320417472A2069F23B301D016B50000000609090908080C09080A0A0A0A09080907080609090707060707000000"
WARM_WATER = "2F446850878465427462A2069F234B00D016150000000101010100010100000100000101020201020201020101020201E60000"
HCA_V100 = "2E446850382041606480A0119F236800D016410000000000000000000000000000000000000009090F110F0C09000FDA0000"
HCA_V105 = "32446850591266506980A0119F23CF07E0169A01680845091A000100000200000000000000000000110B0020361D221F6E9287490000"
HCA_V118 = "294468507764866476F0A000DE246F2500586F2500001A000013006BA1007CB2008DC3009ED4000FE500EE0000"


def frame_from_hex(value: str, rssi: int = RSSI) -> Frame:
    return Frame.from_hex(value, rssi=rssi)


def patch_frame(frame: Frame, offset: int, value: bytes) -> Frame:
    """Return a copy of a frame, with some of its bytes overwritten."""
    buffer = frame.buffer[:offset] + value + frame.buffer[offset + len(value) :]
    return Frame(buffer=buffer, address=frame.address, rssi=frame.rssi)


def assert_raises(exception: type[Exception], fnc: Any, *args: Any) -> None:
    try:
        fnc(*args)
    except exception:  # as err:
        pass  # or: assert True
    else:
        assert False
