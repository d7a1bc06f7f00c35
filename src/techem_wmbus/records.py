#!/usr/bin/env python3
"""Techem wM-Bus - the typed readings (records) extracted from a frame."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from datetime import datetime as dt
from typing import Any, TypeAlias

from .const import RecordType, Unit


@dataclasses.dataclass(frozen=True)
class Quantity:
    """A physical value tagged with its unit."""

    value: float
    unit: Unit

    def __str__(self) -> str:
        return f"{self.value} {self.unit}"


RecordValueT: TypeAlias = float | int | dt | Quantity


@dataclasses.dataclass(frozen=True, kw_only=True)
class Record:
    """A single typed reading, written once by a decoder.

    The value type always follows from the record type:
      - volumes are floats
      - reading dates are naive datetimes at midnight (device-local)
      - temperatures are Quantities in Celsius
      - rssi is an int
    """

    type: RecordType
    value: RecordValueT

    def __str__(self) -> str:
        return f"Record [{self.type}, {self.value}]"


RecordsT: TypeAlias = tuple[Record, ...]


def records_as_dict(records: Iterable[Record]) -> dict[RecordType, RecordValueT]:
    """Return the records as a dict, keyed by record type."""
    return {r.type: r.value for r in records}


def records_as_json(records: Iterable[Record]) -> dict[str, Any]:
    """Return the records as a JSON-serialisable dict."""

    def _jsonify(value: RecordValueT) -> Any:
        if isinstance(value, dt):
            return value.date().isoformat()
        if isinstance(value, Quantity):
            return {"value": value.value, "unit": str(value.unit)}
        return value

    return {str(r.type): _jsonify(r.value) for r in records}
