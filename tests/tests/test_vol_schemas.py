#!/usr/bin/env python3
"""Techem wM-Bus - Test the configuration parsers."""

from typing import Any

import pytest
import voluptuous as vol

from techem_wmbus import SecondaryAddress
from techem_wmbus.exceptions import ConfigError
from techem_wmbus.schemas import (
    SCH_DECODER_CONFIG,
    SCH_DEVICE_ID,
    is_known_device,
    load_config,
)

DEFAULT_CONFIG = {
    "disabled_decoders": [],
    "known_list": [],
    "enforce_known_list": False,
    "log_level": "WARNING",
}

_PASS_CONFIGS: tuple[tuple[dict[str, Any], dict[str, Any]], ...] = (
    ({}, DEFAULT_CONFIG),
    (
        {"disabled_decoders": ["hca_v64"]},
        DEFAULT_CONFIG | {"disabled_decoders": ["hca_v64"]},
    ),
    (
        {"known_list": ["41202312", "5066125a"], "enforce_known_list": True},
        DEFAULT_CONFIG
        | {"known_list": ["41202312", "5066125A"], "enforce_known_list": True},
    ),
    ({"log_level": "debug"}, DEFAULT_CONFIG | {"log_level": "DEBUG"}),
)

_FAIL_CONFIGS: tuple[dict[str, Any], ...] = (
    {"rubbish": True},  # extra keys are not allowed
    {"disabled_decoders": "hca_v64"},  # not a list
    {"disabled_decoders": ["hca_v64", "hca_v64"]},
    {"known_list": ["4120231"]},
    {"known_list": ["41202312", "41202312"]},
    {"known_list": ["TCH:41202312"]},
    {"enforce_known_list": "yes"},
    {"log_level": "VERBOSE"},
)


@pytest.mark.parametrize("config, expected", _PASS_CONFIGS)
def test_config_pass(config: dict[str, Any], expected: dict[str, Any]) -> None:
    assert SCH_DECODER_CONFIG(config) == expected
    assert load_config(config) == expected


@pytest.mark.parametrize("config", _FAIL_CONFIGS)
def test_config_fail(config: dict[str, Any]) -> None:
    with pytest.raises(vol.MultipleInvalid):
        SCH_DECODER_CONFIG(config)

    with pytest.raises(ConfigError):
        load_config(config)


def test_device_id() -> None:
    assert SCH_DEVICE_ID("41202312") == "41202312"
    assert SCH_DEVICE_ID("abcdef01") == "ABCDEF01"

    for device_id in ("", "4120231", "412023120", 41202312):
        with pytest.raises(vol.Invalid):
            SCH_DEVICE_ID(device_id)


def test_is_known_device() -> None:
    known = SecondaryAddress("TCH", "41202312", 0x74, 0x72)
    other = SecondaryAddress("TCH", "42658487", 0x74, 0x62)

    config = load_config({"known_list": ["41202312"]})
    assert is_known_device(config, known)
    assert is_known_device(config, other)  # the list is not enforced

    config = load_config({"known_list": ["41202312"], "enforce_known_list": True})
    assert is_known_device(config, known)
    assert not is_known_device(config, other)

    config = load_config({"enforce_known_list": True})
    assert not is_known_device(config, known)
