#!/usr/bin/env python3
"""Techem wM-Bus - the frame decoders, one per device variant.

A device emits frames of more than one shape, so each decoder selects a layout by
the coding byte (CI-field) that starts the payload. The offsets of a layout are
relative to that byte:

    A0 11 9F23 CF07 E016 9A01 6808 4509  (a v69 heat cost allocator)
    |     |    |    |    |    |    |
    |     |    |    |    |    |    +- radiator temp  +12  23.73 C
    |     |    |    |    |    +------ room temp      +10  21.52 C
    |     |    |    |    +----------- current value  +8   410
    |     |    |    +---------------- current date   +6   14 Nov
    |     |    +--------------------- past value     +4   1999
    |     +-------------------------- past date      +2   2017-12-31
    +-------------------------------- coding         +0
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Final

from . import exceptions as exc
from .address import DeviceSignature
from .const import Coding, DeviceType, Manufacturer, RecordType, Unit
from .frame import Frame
from .helpers import (
    DATE_WIDTH,
    parse_current_date,
    parse_int,
    parse_past_date,
    parse_temperature,
    scale_divisor,
    scale_value,
)
from .records import Record, RecordsT

_LOGGER = logging.getLogger(__name__)


TracerT = Callable[["FrameDecoder", Frame, RecordsT | None], None]

TEMP_WIDTH: Final[int] = 2


@dataclasses.dataclass(frozen=True, kw_only=True)
class FrameLayout:
    """The offsets (from the coding byte) & widths of the fields of a frame."""

    past_date: int
    past_value: int
    current_date: int
    current_value: int
    room_temp: int | None = None
    radiator_temp: int | None = None
    value_width: int = 2
    value_scale: float = 1

    def __post_init__(self) -> None:
        if (self.room_temp is None) != (self.radiator_temp is None):
            raise exc.LayoutError(f"{self}: temperatures must be paired")

        if not 1 <= self.value_width <= 4:
            raise exc.LayoutError(f"{self}: invalid value width")

        if self.value_scale < 1:
            try:
                scale_divisor(self.value_scale)
            except ValueError as err:
                raise exc.LayoutError(f"{self}: {err}") from err

        spans = sorted((o, o + w) for o, w in self._fields())
        if spans[0][0] < 1:
            raise exc.LayoutError(f"{self}: a field overlaps the coding byte")
        for (_, end), (start, _) in zip(spans, spans[1:]):
            if start < end:
                raise exc.LayoutError(f"{self}: fields overlap at offset {start}")

    def _fields(self) -> list[tuple[int, int]]:
        """Return the (offset, width) of each field."""

        result = [
            (self.past_date, DATE_WIDTH),
            (self.past_value, self.value_width),
            (self.current_date, DATE_WIDTH),
            (self.current_value, self.value_width),
        ]
        if self.room_temp is not None and self.radiator_temp is not None:
            result += [(self.room_temp, TEMP_WIDTH), (self.radiator_temp, TEMP_WIDTH)]
        return result

    @property
    def has_temperatures(self) -> bool:
        return self.room_temp is not None

    @property
    def min_length(self) -> int:
        """Return the length of the payload, including the coding byte."""
        return max(o + w for o, w in self._fields())


class FrameDecoder:
    """A decoder for the frames of a device variant.

    Decoders hold no per-frame state, so an instance can decode frames concurrently.
    """

    def __init__(
        self,
        name: str,
        signatures: Iterable[DeviceSignature],
        layouts: Mapping[int, FrameLayout],
        *,
        reports_temperature: bool = False,
        unit: Unit = Unit.HCA_UNITS,
        tracer: TracerT | None = None,
    ) -> None:
        self.name = name
        self.signatures: tuple[DeviceSignature, ...] = tuple(signatures)
        self.layouts: Mapping[int, FrameLayout] = MappingProxyType(dict(layouts))
        self.reports_temperature = reports_temperature
        self.unit = unit  # of the volumes
        self._tracer = tracer

        if not self.signatures or not self.layouts:
            raise exc.LayoutError(f"{self}: has no signatures/layouts")

        if reports_temperature and not all(
            lay.has_temperatures for lay in self.layouts.values()
        ):
            raise exc.LayoutError(f"{self}: a layout has no temperature fields")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"

    def __str__(self) -> str:
        return self.name

    def matches(self, signature: DeviceSignature) -> bool:
        """Return True if this decoder is responsible for the signature."""
        return any(s.matches(signature) for s in self.signatures)

    def with_tracer(self, tracer: TracerT | None) -> FrameDecoder:
        """Return a copy of this decoder, with a different tracer."""
        return FrameDecoder(
            self.name,
            self.signatures,
            self.layouts,
            reports_temperature=self.reports_temperature,
            unit=self.unit,
            tracer=tracer,
        )

    def decode(self, frame: Frame) -> RecordsT | None:
        """Decode a frame into its records.

        Return None if the frame's coding byte is not one of this decoder's layouts
        (the decoder doesn't apply). Raise DecodeError if the frame is corrupt, so
        that a partial set of records is never returned.
        """

        offset = frame.payload_offset
        coding = parse_int(frame.buffer, offset, width=1)

        if (layout := self.layouts.get(coding)) is None:
            self._trace(frame, None)
            return None

        if len(frame.buffer) < offset + layout.min_length:
            raise exc.PayloadTooShort(
                f"{self}: coding 0x{coding:02X} needs {offset + layout.min_length} "
                f"bytes, but frame is {len(frame.buffer)} bytes: {frame}"
            )

        records = self._decode_layout(frame, offset, layout)
        self._trace(frame, records)
        return records

    def _decode_layout(
        self, frame: Frame, offset: int, layout: FrameLayout
    ) -> RecordsT:
        buf = frame.buffer

        def value(rel: int) -> float:
            raw = parse_int(buf, offset + rel, width=layout.value_width)
            return scale_value(raw, layout.value_scale)

        past_date = parse_past_date(buf, offset + layout.past_date)
        past_value = value(layout.past_value)
        current_date = parse_current_date(
            buf, offset + layout.current_date, after=past_date
        )
        current_value = value(layout.current_value)

        records = [
            Record(type=RecordType.CURRENT_VOLUME, value=current_value),
            Record(type=RecordType.CURRENT_READING_DATE, value=current_date),
            Record(type=RecordType.PAST_VOLUME, value=past_value),
            Record(type=RecordType.PAST_READING_DATE, value=past_date),
            Record(type=RecordType.RSSI, value=int(frame.rssi)),
        ]

        if self.reports_temperature:
            assert layout.room_temp is not None and layout.radiator_temp is not None
            records += [
                Record(
                    type=RecordType.ROOM_TEMPERATURE,
                    value=parse_temperature(buf, offset + layout.room_temp),
                ),
                Record(
                    type=RecordType.RADIATOR_TEMPERATURE,
                    value=parse_temperature(buf, offset + layout.radiator_temp),
                ),
            ]

        return tuple(records)

    def _trace(self, frame: Frame, records: RecordsT | None) -> None:
        if self._tracer:
            self._tracer(self, frame, records)
        elif records is None:
            _LOGGER.debug("%s: not applicable (coding): %s", self, frame)
        else:
            _LOGGER.debug("%s: decoded %s records: %s", self, len(records), frame)


def _tch(version: int | None, device_type: int) -> DeviceSignature:
    return DeviceSignature(Manufacturer.TCH, version, device_type)


# the classic heat cost allocator frame (FHKV data II/III)
_HCA_LAYOUT = FrameLayout(
    past_date=2,
    past_value=4,
    current_date=6,
    current_value=8,
    room_temp=10,
    radiator_temp=12,
)

# the v94 allocators have an extra (status) byte before the current value
_HCA_V94_LAYOUT = FrameLayout(
    past_date=2,
    past_value=4,
    current_date=6,
    current_value=9,
    room_temp=11,
    radiator_temp=13,
)

# the v118 allocators have 3-byte values, and no temperatures
_HCA_V118_LAYOUT = FrameLayout(
    past_date=2,
    past_value=4,
    current_date=7,
    current_value=9,
    value_width=3,
)

# the water meters (MK Radio 3) count in tenths of a m³
_WATER_LAYOUT = FrameLayout(
    past_date=2,
    past_value=4,
    current_date=6,
    current_value=8,
    value_scale=0.1,
)


HCA_V64 = FrameDecoder(
    "hca_v64",
    (_tch(0x64, DeviceType.TCH_HCA),),
    {Coding.HCA: dataclasses.replace(_HCA_LAYOUT, room_temp=None, radiator_temp=None)},
)
HCA_V69 = FrameDecoder(
    "hca_v69",
    (_tch(0x69, DeviceType.TCH_HCA),),
    {Coding.HCA: _HCA_LAYOUT},
    reports_temperature=True,
)
HCA_V94 = FrameDecoder(
    "hca_v94",
    (
        _tch(0x94, DeviceType.TCH_HCA),
        _tch(0x94, DeviceType.HEAT_COST_ALLOCATOR),
    ),
    {Coding.WATER: _HCA_V94_LAYOUT},
    reports_temperature=True,
)
HCA_V118 = FrameDecoder(
    "hca_v118",
    (_tch(0x76, DeviceType.TCH_HCA_V118),),
    {Coding.HCA: _HCA_V118_LAYOUT},
)
WATER_V116 = FrameDecoder(
    "water_v116",
    (
        _tch(0x74, DeviceType.TCH_WARM_WATER),
        _tch(0x74, DeviceType.TCH_COLD_WATER),
    ),
    {Coding.WATER: _WATER_LAYOUT},
    unit=Unit.CUBIC_METRE,
)

DEFAULT_DECODERS: Final[tuple[FrameDecoder, ...]] = (
    HCA_V64,
    HCA_V69,
    HCA_V94,
    HCA_V118,
    WATER_V116,
)
