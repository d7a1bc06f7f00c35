#!/usr/bin/env python3
"""Techem wM-Bus - dispatch a frame to its decoder(s), by device signature."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from . import exceptions as exc
from .address import DeviceSignature
from .const import SZ_DISABLED_DECODERS
from .decoders import DEFAULT_DECODERS, FrameDecoder
from .records import RecordsT

if TYPE_CHECKING:
    from .frame import Frame

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_RAISE_DECODE_ERRORS: Final[bool] = False  # useful for dev/test

_LOGGER = logging.getLogger(__name__)


__all__ = ["DecodeResult", "DecodeStatus", "DecoderRegistry", "registry_from_config"]


class DecodeStatus(StrEnum):
    DECODED = "decoded"
    NOT_APPLICABLE = "not_applicable"  # a decoder matched, but not the coding byte
    UNKNOWN_DEVICE = "unknown_device"  # no decoder for the device signature
    FAILED = "failed"  # the frame is corrupt


@dataclasses.dataclass(frozen=True, kw_only=True)
class DecodeResult:
    """The outcome of decoding a frame."""

    status: DecodeStatus
    records: RecordsT = ()
    decoder: str | None = None
    error: exc.WMBusException | None = None

    def __bool__(self) -> bool:
        return self.status == DecodeStatus.DECODED


class DecoderRegistry:
    """A registry of decoders, keyed by device signature.

    The registry is built once, and is read-only thereafter.
    """

    def __init__(self, decoders: Iterable[FrameDecoder] = DEFAULT_DECODERS) -> None:
        self._decoders: tuple[FrameDecoder, ...] = tuple(decoders)

        by_signature: dict[DeviceSignature, list[FrameDecoder]] = {}
        for decoder in self._decoders:
            for sig in decoder.signatures:
                by_signature.setdefault(sig, []).append(decoder)

        self._by_signature: Mapping[DeviceSignature, tuple[FrameDecoder, ...]] = (
            MappingProxyType({k: tuple(v) for k, v in by_signature.items()})
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({[d.name for d in self._decoders]})"

    def __len__(self) -> int:
        return len(self._decoders)

    def __iter__(self) -> Iterator[FrameDecoder]:
        return iter(self._decoders)

    @property
    def signatures(self) -> tuple[DeviceSignature, ...]:
        return tuple(self._by_signature)

    def lookup(self, signature: DeviceSignature) -> tuple[FrameDecoder, ...]:
        """Return the decoders for a signature, in order (versioned ones first).

        Return an empty tuple if there are none.
        """
        result = self._by_signature.get(signature, ())
        if signature.version is not None:
            result += self._by_signature.get(signature.any_version, ())
        return tuple(dict.fromkeys(result))

    def decoder_for(self, signature: DeviceSignature) -> FrameDecoder:
        """Return the (first) decoder for a signature.

        Raise UnknownDeviceType if there is none.
        """
        if decoders := self.lookup(signature):
            return decoders[0]
        raise exc.UnknownDeviceType(f"No decoder for device type: {signature}")

    def decode(self, frame: Frame) -> DecodeResult:
        """Decode a frame with the decoder(s) registered for its signature.

        The decoders are tried in order, until one applies. A corrupt frame results in
        a FAILED result, rather than an exception.
        """

        if not (decoders := self.lookup(frame.signature)):
            _LOGGER.info("%s < Unknown device type (%s)", frame, frame.signature)
            return DecodeResult(
                status=DecodeStatus.UNKNOWN_DEVICE,
                error=exc.UnknownDeviceType(f"Unknown device type: {frame.signature}"),
            )

        for decoder in decoders:
            try:
                records = decoder.decode(frame)
            except exc.DecodeError as err:
                if _DBG_RAISE_DECODE_ERRORS:
                    raise
                _LOGGER.warning("%s < %s: decoding failed: %s", frame, decoder, err)
                return DecodeResult(
                    status=DecodeStatus.FAILED, decoder=decoder.name, error=err
                )
            if records is not None:
                return DecodeResult(
                    status=DecodeStatus.DECODED, records=records, decoder=decoder.name
                )

        _LOGGER.info("%s < No layout for this frame (coding)", frame)
        return DecodeResult(status=DecodeStatus.NOT_APPLICABLE)


def registry_from_config(
    config: dict[str, Any], decoders: Iterable[FrameDecoder] = DEFAULT_DECODERS
) -> DecoderRegistry:
    """Return a registry of the decoders enabled by a (validated) config."""

    disabled = set(config.get(SZ_DISABLED_DECODERS, ()))
    decoders = tuple(decoders)

    if unknown := disabled - {d.name for d in decoders}:
        raise exc.ConfigError(f"Unknown decoder(s): {', '.join(sorted(unknown))}")

    return DecoderRegistry(d for d in decoders if d.name not in disabled)
