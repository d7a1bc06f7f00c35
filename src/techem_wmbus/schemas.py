#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames.

Schema processor for the decoder configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, TypedDict

import voluptuous as vol

from . import exceptions as exc
from .const import (
    DEVICE_ID_REGEX,
    SZ_DISABLED_DECODERS,
    SZ_ENFORCE_KNOWN_LIST,
    SZ_KNOWN_LIST,
    SZ_LOG_LEVEL,
)

if TYPE_CHECKING:
    from .frame import AddressT

_LOGGER = logging.getLogger(__name__)


LOG_LEVELS: Final = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DecoderConfigT(TypedDict):
    disabled_decoders: list[str]
    known_list: list[str]
    enforce_known_list: bool
    log_level: str


SCH_DEVICE_ID = vol.All(str, vol.Upper, vol.Match(DEVICE_ID_REGEX))

SCH_DECODER_CONFIG = vol.Schema(
    {
        vol.Optional(SZ_DISABLED_DECODERS, default=[]): vol.All(
            [str], vol.Unique()
        ),  # e.g. hca_v64
        vol.Optional(SZ_KNOWN_LIST, default=[]): vol.All(
            [SCH_DEVICE_ID], vol.Unique()
        ),
        vol.Optional(SZ_ENFORCE_KNOWN_LIST, default=False): bool,
        vol.Optional(SZ_LOG_LEVEL, default="WARNING"): vol.All(
            str, vol.Upper, vol.In(LOG_LEVELS)
        ),
    },
    extra=vol.PREVENT_EXTRA,
)


def load_config(config: dict[str, Any] | None = None) -> DecoderConfigT:
    """Return a validated config, with defaults for any missing keys."""

    try:
        result: DecoderConfigT = SCH_DECODER_CONFIG(config or {})
    except vol.Invalid as err:
        raise exc.ConfigError(f"Invalid config: {err}") from err

    if result[SZ_ENFORCE_KNOWN_LIST] and not result[SZ_KNOWN_LIST]:
        _LOGGER.warning(
            f"An empty {SZ_KNOWN_LIST} is enforced: no frames will be decoded"
        )
    return result


def is_known_device(config: DecoderConfigT, address: AddressT) -> bool:
    """Return True if frames from the address are to be decoded."""

    if not config[SZ_ENFORCE_KNOWN_LIST]:
        return True
    return getattr(address, "device_id", None) in config[SZ_KNOWN_LIST]
