#!/usr/bin/env python3
"""Techem wM-Bus - a frame (one raw transmission) as received from a meter.

The receiver (transport) delivers the raw buffer, starting with its L-field, and
the signal strength it measured:

    `2F 44 6850 12232041 74 72 A2 069F23B301D016B5...`
     L  C  M    A        V  T  CI payload
"""

from __future__ import annotations

import dataclasses
from typing import Protocol

from . import exceptions as exc
from .address import DeviceSignature, SecondaryAddress
from .const import ADDRESS_OFFSET, DEFAULT_RSSI, FRAME_HEX_REGEX


class AddressT(Protocol):
    """What a decoder needs of an address: its signature & its size on the wire."""

    @property
    def signature(self) -> DeviceSignature: ...

    def as_bytes(self) -> bytes: ...


def hex_to_bytes(value: str) -> bytes:
    """Convert a hex string (say '2F44 6850') into bytes."""
    value = "".join(value.split()).upper()
    if not FRAME_HEX_REGEX.match(value):
        raise exc.FrameInvalid(f"Bad frame: not a hex string: >>>{value}<<<")
    return bytes.fromhex(value)


def bytes_to_hex(value: bytes) -> str:
    return value.hex().upper()


@dataclasses.dataclass(frozen=True)
class Frame:
    """A frame: a raw buffer, the meter's secondary address and a signal strength.

    Frames are read-only: decoders never modify them.
    """

    buffer: bytes
    address: AddressT
    rssi: int = DEFAULT_RSSI

    def __str__(self) -> str:
        return f"{self.address} {bytes_to_hex(self.buffer)}"

    @property
    def payload_offset(self) -> int:
        """Return the offset of the application payload (its CI-field, or coding).

        The payload follows the address, which follows the L-field & C-field.
        """
        return len(self.address.as_bytes()) + ADDRESS_OFFSET

    @property
    def signature(self) -> DeviceSignature:
        return self.address.signature

    @classmethod
    def from_bytes(cls, buffer: bytes, rssi: int = DEFAULT_RSSI) -> Frame:
        """Create a frame from a raw buffer, parsing its link layer header.

        Will raise FrameInvalid if the header is not consistent.
        """

        buffer = bytes(buffer)
        if not buffer:
            raise exc.FrameInvalid(f"Bad frame: too short: {len(buffer)} bytes")

        # the L-field excludes itself, some receivers append trailing bytes (CRC)
        if buffer[0] + 1 > len(buffer):
            raise exc.FrameInvalid(
                f"Bad frame: L-field is {buffer[0]}, but only {len(buffer)} bytes"
            )

        address = SecondaryAddress.from_bytes(buffer, offset=ADDRESS_OFFSET)

        frame = cls(buffer=buffer, address=address, rssi=rssi)
        if frame.payload_offset >= buffer[0] + 1:
            raise exc.FrameInvalid(f"Bad frame: no payload: >>>{frame}<<<")
        return frame

    @classmethod
    def from_hex(cls, value: str, rssi: int = DEFAULT_RSSI) -> Frame:
        """Create a frame from a hex string (whitespace is ignored)."""
        return cls.from_bytes(hex_to_bytes(value), rssi=rssi)
