#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import pytest
from designbench.lib.errors import MetricNotFoundError, ParseError
from designbench.plugins.parsers.darwin_ps import DarwinPsParser, parse_darwin_time
from designbench.plugins.parsers.launchctl import LaunchctlPidParser
from designbench.plugins.parsers.memory_usage import MemoryUsageParser, size_to_mb
from designbench.plugins.parsers.simctl import runtime_to_version, SimctlDevicesParser

from tests.conftest import (
    DARWIN_PS_OUTPUT,
    LAUNCHCTL_OUTPUT,
    MEMORY_USAGE_OUTPUT,
    SIMCTL_JSON,
)


def lines(text):
    return text.splitlines()


def test_memory_usage_physical_footprint():
    metrics = MemoryUsageParser().parse(lines(MEMORY_USAGE_OUTPUT), [], 0)
    assert metrics == {"memory_mb": pytest.approx(52.3)}


def test_memory_usage_kilobytes():
    metrics = MemoryUsageParser().parse(["Physical footprint: 53500 KB"], [], 0)
    assert metrics["memory_mb"] == pytest.approx(53500 / 1024.0)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1048576 bytes", 1.0),
        ("2 GB", 2048.0),
        ("512 KiB", 0.5),
        ("7.5mb", 7.5),
        ("4kbps", 4 / 1024.0),
    ],
)
def test_size_to_mb_units(text, expected):
    assert size_to_mb(text) == pytest.approx(expected)


def test_memory_usage_without_footprint():
    with pytest.raises(MetricNotFoundError, match="physical footprint"):
        MemoryUsageParser().parse(["Resident size: 10 MB"], [], 0)


def test_darwin_time_with_days():
    assert parse_darwin_time("1-02:03:04") == ((1 * 24 + 2) * 3600 + 3 * 60 + 4) * 1000


def test_darwin_time_short_forms():
    assert parse_darwin_time("0:01.50") == pytest.approx(1500.0)
    assert parse_darwin_time("1:02:03") == (3600 + 120 + 3) * 1000


@pytest.mark.parametrize("value", ["abc", "12", "x-01:00", "1:2:3:4"])
def test_darwin_time_invalid(value):
    with pytest.raises(MetricNotFoundError):
        parse_darwin_time(value)


def test_darwin_ps_row():
    metrics = DarwinPsParser("4321").parse(lines(DARWIN_PS_OUTPUT), [], 0)
    assert metrics == {"cpu_percent": 12.5, "cpu_time_ms": pytest.approx(1500.0)}


def test_darwin_ps_header_only():
    with pytest.raises(MetricNotFoundError):
        DarwinPsParser("4321").parse(["  PID  %CPU      TIME"], [], 0)


def test_launchctl_pid():
    parser = LaunchctlPidParser("com.example.demo")
    assert parser.parse(lines(LAUNCHCTL_OUTPUT), [], 0) == {"pid": "4321"}


def test_launchctl_not_running():
    output = ["PID\tStatus\tLabel", "-\t0\tUIKitApplication:com.example.demo[0x1]"]
    with pytest.raises(MetricNotFoundError):
        LaunchctlPidParser("com.example.demo").parse(output, [], 0)


def test_simctl_devices():
    devices = SimctlDevicesParser().parse(lines(SIMCTL_JSON), [], 0)["devices"]
    assert sorted(devices) == ["AAAA-1111", "BBBB-2222"]
    booted = devices["BBBB-2222"]
    assert booted.name == "iPhone 15 Pro"
    assert booted.state == "Booted"
    assert booted.runtime == "com.apple.CoreSimulator.SimRuntime.iOS-17-2"


def test_simctl_invalid_json():
    with pytest.raises(ParseError):
        SimctlDevicesParser().parse(["not json"], [], 0)


@pytest.mark.parametrize(
    "runtime,expected",
    [
        ("com.apple.CoreSimulator.SimRuntime.iOS-17-2", "iOS 17.2"),
        ("com.apple.CoreSimulator.SimRuntime.tvOS-17-0", "tvOS 17.0"),
        ("com.apple.CoreSimulator.SimRuntime.watchOS-10-1", "Watchos 10.1"),
        ("com.apple.CoreSimulator.SimRuntime.xrOS-1-0", "Xros 1.0"),
        ("visionOS", "visionOS"),
    ],
)
def test_runtime_to_version(runtime, expected):
    assert runtime_to_version(runtime) == expected


@pytest.mark.parametrize(
    "payload",
    [
        '{"devices": {"com.apple.CoreSimulator.SimRuntime.iOS-17-2": ["x"]}}',
        '{"devices": {"com.apple.CoreSimulator.SimRuntime.iOS-17-2": "x"}}',
        '{"devices": ["x"]}',
    ],
)
def test_simctl_unexpected_shape(payload):
    with pytest.raises(ParseError, match="decode simctl json"):
        SimctlDevicesParser().parse([payload], [], 0)


def test_simctl_null_runtime_group():
    payload = '{"devices": {"com.apple.CoreSimulator.SimRuntime.iOS-17-2": null}}'
    assert SimctlDevicesParser().parse([payload], [], 0) == {"devices": {}}
