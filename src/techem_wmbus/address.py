#!/usr/bin/env python3
"""Techem wM-Bus - the secondary (link layer) address of a wireless meter.

The address is 8 bytes, following the L-field & C-field of a frame:

    68 50       manufacturer (LE, three 5-bit letters, 'A' == 1)
    12 23 20 41 identification number (LE, BCD) -> 41202312
    74          version (generation)
    72          device type
"""

from __future__ import annotations

import dataclasses
from functools import lru_cache

from . import exceptions as exc
from .const import ADDRESS_LEN, DEVICE_ID_REGEX, MANUFACTURER_REGEX


def decode_manufacturer(value: int) -> str:
    """Convert (say) 0x5068 to 'TCH'."""
    if not 0 <= value <= 0x7FFF:
        raise exc.AddressInvalid(f"Invalid manufacturer code: 0x{value:04X}")
    return "".join(chr(((value >> s) & 0x1F) + 64) for s in (10, 5, 0))


def encode_manufacturer(value: str) -> int:
    """Convert (say) 'TCH' to 0x5068."""
    if not isinstance(value, str) or not MANUFACTURER_REGEX.match(value):
        raise exc.AddressInvalid(f"Invalid manufacturer: {value}")
    c1, c2, c3 = (ord(c) - 64 for c in value)
    return (c1 << 10) + (c2 << 5) + c3


@dataclasses.dataclass(frozen=True)
class DeviceSignature:
    """The key used to select a decoder: manufacturer, version & device type.

    A signature without a version matches any version of that device type.
    """

    manufacturer: str
    version: int | None
    device_type: int

    def __str__(self) -> str:
        version = "--" if self.version is None else f"{self.version:02X}"
        return f"{self.manufacturer}/{version}/{self.device_type:02X}"

    def matches(self, other: DeviceSignature) -> bool:
        """Return True if the other (a frame's) signature is covered by this one."""
        return (
            self.manufacturer == other.manufacturer
            and self.device_type == other.device_type
            and self.version in (None, other.version)
        )

    @property
    def any_version(self) -> DeviceSignature:
        return dataclasses.replace(self, version=None)


@dataclasses.dataclass(frozen=True)
class SecondaryAddress:
    """The secondary address of a wireless meter."""

    manufacturer: str
    device_id: str
    version: int
    device_type: int

    def __post_init__(self) -> None:
        if not MANUFACTURER_REGEX.match(self.manufacturer):
            raise exc.AddressInvalid(f"Invalid manufacturer: {self.manufacturer}")
        if not DEVICE_ID_REGEX.match(self.device_id):
            raise exc.AddressInvalid(f"Invalid device_id: {self.device_id}")
        if not (0 <= self.version <= 0xFF and 0 <= self.device_type <= 0xFF):
            raise exc.AddressInvalid(
                f"Invalid version/device type: {self.version}/{self.device_type}"
            )

    def __str__(self) -> str:
        return f"{self.manufacturer}:{self.device_id}"

    def __repr__(self) -> str:
        return f"{self} ({self.version:02X}/{self.device_type:02X})"

    @property
    def signature(self) -> DeviceSignature:
        return DeviceSignature(self.manufacturer, self.version, self.device_type)

    def as_bytes(self) -> bytes:
        """Return the address as it is on the wire."""
        return (
            encode_manufacturer(self.manufacturer).to_bytes(2, "little")
            + bytes.fromhex(self.device_id)[::-1]
            + bytes((self.version, self.device_type))
        )

    @classmethod
    def from_bytes(cls, buffer: bytes, offset: int = 0) -> SecondaryAddress:
        """Create an address from the 8 bytes at offset of a buffer."""

        if len(buffer) < offset + ADDRESS_LEN:
            raise exc.AddressInvalid(
                f"Buffer too short for an address: {len(buffer)} bytes"
            )
        raw = bytes(buffer[offset : offset + ADDRESS_LEN])
        return address_from_bytes(raw)


@lru_cache(maxsize=256)
def address_from_bytes(raw: bytes) -> SecondaryAddress:
    """Factory method to cache & return an address from its 8 wire bytes."""
    return SecondaryAddress(
        manufacturer=decode_manufacturer(int.from_bytes(raw[:2], "little")),
        device_id=raw[2:6][::-1].hex().upper(),
        version=raw[6],
        device_type=raw[7],
    )
