#!/usr/bin/env python3
"""Techem wM-Bus - exceptions within the frame/decoder layer."""

from __future__ import annotations


class _WMBusBaseException(Exception):
    """Base class for all techem_wmbus exceptions."""

    pass


class WMBusException(_WMBusBaseException):
    """Base class for all techem_wmbus exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


########################################################################################
# Errors at the transport boundary (the raw frame and its address)


class FrameInvalid(WMBusException):
    """The frame is corrupt/not internally consistent (e.g. a bad L-field)."""


class AddressInvalid(FrameInvalid):
    """The frame's secondary address cannot be parsed."""


########################################################################################
# Errors within a recognised frame layout (the decoder applies, but the data is bad)


class DecodeError(WMBusException):
    """A field of a recognised frame layout is structurally invalid."""


class DateInvalid(DecodeError):
    """A bit-packed date has an impossible day/month/year."""

    HINT = "is the frame corrupt, or is the decoder mapped to the wrong device?"


class PayloadTooShort(DecodeError):
    """The buffer ends before a field declared by the frame layout."""


########################################################################################
# Errors above the decoders (dispatch, configuration)


class UnknownDeviceType(WMBusException):
    """No decoder is registered for the device's signature."""


class LayoutError(WMBusException):
    """A decoder's layout is not internally consistent (this shouldn't happen)."""


class ConfigError(WMBusException):
    """The configuration is invalid."""
