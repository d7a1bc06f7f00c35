#!/usr/bin/env python3
"""A CLI for the techem_wmbus library.

Parse a log of frames, one per line: `[RSSI ]HEX[ # comment]`, e.g.:

    010 2F446850122320417472A2069F23B301D016B500...  # cold water meter
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any, Final, TextIO

import click
from colorama import Fore, Style, init as colorama_init

from techem_wmbus import (
    DecoderRegistry,
    DecodeResult,
    DecodeStatus,
    Frame,
    exceptions as exc,
    registry_from_config,
)
from techem_wmbus.const import (
    DEFAULT_RSSI,
    SZ_DECODER,
    SZ_DEVICE_ID,
    SZ_DEVICE_TYPE,
    SZ_ERROR,
    SZ_LOG_LEVEL,
    SZ_MANUFACTURER,
    SZ_RECORDS,
    SZ_RSSI,
    SZ_STATUS,
    SZ_VERSION,
)
from techem_wmbus.logger import DEFAULT_DATEFMT, DEFAULT_FMT, set_logging
from techem_wmbus.records import records_as_json
from techem_wmbus.schemas import DecoderConfigT, is_known_device, load_config

_LOGGER = logging.getLogger(__name__)

# this is called after import colorlog to ensure its handlers wrap the correct streams
logging.basicConfig(level=logging.WARNING, format=DEFAULT_FMT, datefmt=DEFAULT_DATEFMT)


SZ_CONFIG: Final = "config"
SZ_REGISTRY: Final = "registry"
SZ_SKIPPED: Final = "skipped"

COLORS = {
    DecodeStatus.DECODED: Fore.GREEN,
    DecodeStatus.NOT_APPLICABLE: Fore.YELLOW,
    DecodeStatus.UNKNOWN_DEVICE: Fore.CYAN,
    DecodeStatus.FAILED: Style.BRIGHT + Fore.RED,
}

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# e.g. 010, -042 (not 32, which may be the first byte of a spaced frame)
RSSI_REGEX = re.compile(r"^([-+]\d{1,3}|\d{3})$")


def split_line(line: str, default_rssi: int = DEFAULT_RSSI) -> tuple[int, str] | None:
    """Split a log line into its RSSI & frame, or return None if it has no frame."""

    line = line.split("#", maxsplit=1)[0].strip()
    if not line:
        return None

    fields = line.split(maxsplit=1)
    if len(fields) == 2 and RSSI_REGEX.match(fields[0]):
        return int(fields[0]), fields[1]
    return default_rssi, line


def result_as_dict(frame: Frame, result: DecodeResult | None) -> dict[str, Any]:
    """Return a JSON-serialisable summary of a frame & its decoding."""

    address = frame.address
    summary: dict[str, Any] = {
        SZ_MANUFACTURER: getattr(address, "manufacturer", None),
        SZ_DEVICE_ID: getattr(address, "device_id", None),
        SZ_VERSION: f"{frame.signature.version:02X}",
        SZ_DEVICE_TYPE: f"{frame.signature.device_type:02X}",
        SZ_RSSI: frame.rssi,
    }
    if result is None:
        return summary | {SZ_STATUS: SZ_SKIPPED}

    summary |= {SZ_STATUS: str(result.status), SZ_DECODER: result.decoder}
    if result.records:
        summary[SZ_RECORDS] = records_as_json(result.records)
    if result.error:
        summary[SZ_ERROR] = str(result.error)
    return summary


def print_result(
    frame: Frame,
    result: DecodeResult | None,
    *,
    as_json: bool = False,
    color: bool | None = None,
) -> None:
    if as_json:
        click.echo(json.dumps(result_as_dict(frame, result)))
        return

    if result is None:
        click.echo(f"{Style.DIM}{frame.address} skipped (unknown)", color=color)
        return

    colour = COLORS[result.status]
    if not result:
        click.echo(
            f"{colour}{frame.address} {result.status}: {result.error or ''}",
            color=color,
        )
        return

    click.echo(f"{colour}{frame.address} {result.decoder}:", color=color)
    for record in result.records:
        click.echo(f"    {record.type:<21} {record.value}", color=color)


def parse_lines(
    lines: TextIO,
    registry: DecoderRegistry,
    config: DecoderConfigT,
    *,
    rssi: int = DEFAULT_RSSI,
    as_json: bool = False,
    color: bool | None = None,
) -> dict[str, int]:
    """Decode each frame of a log, print the results & return a tally of them."""

    tally: dict[str, int] = {}

    for num, line in enumerate(lines, start=1):
        if (fields := split_line(line, default_rssi=rssi)) is None:
            continue

        try:
            frame = Frame.from_hex(fields[1], rssi=fields[0])
        except exc.FrameInvalid as err:
            _LOGGER.warning("Line %s: %s", num, err)
            tally["invalid"] = tally.get("invalid", 0) + 1
            continue

        result: DecodeResult | None = None
        if is_known_device(config, frame.address):
            result = registry.decode(frame)

        print_result(frame, result, as_json=as_json, color=color)
        key = SZ_SKIPPED if result is None else str(result.status)
        tally[key] = tally.get(key, 0) + 1

    return tally


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", count=True, help="increase logging (-vv for debug)")
@click.option("-c", "--config-file", type=click.File("r"), help="a JSON config file")
@click.pass_context
def cli(ctx: click.Context, verbose: int = 0, config_file: TextIO | None = None) -> None:
    """A CLI for the techem_wmbus library."""

    try:
        config = load_config(json.load(config_file) if config_file else None)
        registry = registry_from_config(dict(config))
    except (exc.ConfigError, json.JSONDecodeError) as err:
        raise click.UsageError(f"{err}") from err

    level = config[SZ_LOG_LEVEL]
    if verbose:
        level = "DEBUG" if verbose > 1 else "INFO"
    set_logging(level)

    ctx.obj = {SZ_CONFIG: config, SZ_REGISTRY: registry}


@cli.command()
@click.argument("input-file", type=click.File("r"), default="-")
@click.option("-r", "--rssi", type=int, default=DEFAULT_RSSI, help="default RSSI")
@click.option("-j", "--json", "as_json", is_flag=True, help="output JSON lines")
@click.option("--no-color", is_flag=True, help="don't colour the output")
@click.pass_obj
def parse(
    obj: dict[str, Any], input_file: TextIO, rssi: int, as_json: bool, no_color: bool
) -> None:
    """Decode a log of frames (from a file, or STDIN)."""

    if not (no_color or as_json) and sys.stdout.isatty():
        colorama_init(autoreset=True)  # only needed for Windows consoles

    tally = parse_lines(
        input_file,
        obj[SZ_REGISTRY],
        obj[SZ_CONFIG],
        rssi=rssi,
        as_json=as_json,
        color=False if no_color else None,
    )

    if not as_json:
        summary = ", ".join(f"{k}: {v}" for k, v in sorted(tally.items()))
        click.echo(f"Frames: {summary or 'none'}", err=True)


@cli.command()
@click.pass_obj
def decoders(obj: dict[str, Any]) -> None:
    """List the enabled decoders, and the devices they decode."""

    registry: DecoderRegistry = obj[SZ_REGISTRY]
    for decoder in registry:
        codings = ", ".join(f"{c:02X}" for c in decoder.layouts)
        signatures = ", ".join(str(s) for s in decoder.signatures)
        temps = " (temperatures)" if decoder.reports_temperature else ""
        click.echo(
            f"{decoder.name:<12} {signatures:<24} coding: {codings}, "
            f"volumes: {decoder.unit}{temps}"
        )


def main() -> None:
    cli(prog_name="techem-wmbus")


if __name__ == "__main__":
    main()
