#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Benchmark records and their JSON / text forms.

Every record is frozen and built once per run. Measurements that were not
taken are None (never 0) and are left out of the JSON, as are empty
strings and lists, so an Android-only run has no "ios" key.
"""

import dataclasses
import json
import typing
from datetime import datetime

PLACEHOLDER = "-"


def _key(name):
    return dataclasses.field(default=None, metadata={"json": name})


def _text(name):
    return dataclasses.field(default="", metadata={"json": name})


def _is_empty(value):
    return value is None or value == "" or value == () or value == []


def _encode(record) -> typing.Dict[str, typing.Any]:
    data = {}
    for field in dataclasses.fields(record):
        value = getattr(record, field.name)
        if _is_empty(value):
            continue
        if dataclasses.is_dataclass(value):
            value = _encode(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, tuple):
            value = list(value)
        data[field.metadata.get("json", field.name)] = value
    return data


def _decode_kwargs(cls, data) -> typing.Dict[str, typing.Any]:
    kwargs = {}
    for field in dataclasses.fields(cls):
        key = field.metadata.get("json", field.name)
        if key in data:
            kwargs[field.name] = data[key]
    return kwargs


def _decode_common(kwargs):
    if kwargs.get("device") is not None:
        kwargs["device"] = DeviceMetadata.from_dict(kwargs["device"])
    if kwargs.get("timestamp") is not None:
        kwargs["timestamp"] = datetime.fromisoformat(kwargs["timestamp"])
    return kwargs


@dataclasses.dataclass(frozen=True)
class DeviceMetadata:
    id: str = _text("id")
    model: str = _text("model")
    os_version: str = _text("osVersion")
    platform: str = _text("platform")
    resolution: str = _text("resolution")

    def is_empty(self) -> bool:
        # platform is always known, it does not count as identity
        return not (self.id or self.model or self.os_version or self.resolution)

    def or_none(self) -> typing.Optional["DeviceMetadata"]:
        return None if self.is_empty() else self

    def to_dict(self):
        return _encode(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**_decode_kwargs(cls, data))


@dataclasses.dataclass(frozen=True)
class AndroidMetrics:
    component: str = _text("component")
    activity: str = _text("activity")
    package: str = _text("package")
    benchmark_component: str = _text("benchmarkComponent")
    first_frame_ms: typing.Optional[float] = _key("firstFrameMs")
    total_time_ms: typing.Optional[float] = _key("totalTimeMs")
    wait_time_ms: typing.Optional[float] = _key("waitTimeMs")
    memory_mb: typing.Optional[float] = _key("memoryMB")
    cpu_percent: typing.Optional[float] = _key("cpuPercent")
    cpu_time_ms: typing.Optional[float] = _key("cpuTimeMs")
    launch_state: str = _text("launchState")
    device: typing.Optional[DeviceMetadata] = _key("device")
    command: str = _text("command")
    timestamp: typing.Optional[datetime] = _key("timestamp")

    def to_dict(self):
        return _encode(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**_decode_common(_decode_kwargs(cls, data)))


@dataclasses.dataclass(frozen=True)
class IOSMetrics:
    component: str = _text("component")
    bundle_id: str = _text("bundleId")
    launch_args: typing.Tuple[str, ...] = dataclasses.field(
        default=(), metadata={"json": "launchArgs"}
    )
    benchmark_component: str = _text("benchmarkComponent")
    # wall-clock duration of `simctl launch`, not an in-app timing
    render_time_ms: typing.Optional[float] = _key("renderTimeMs")
    memory_mb: typing.Optional[float] = _key("memoryMB")
    cpu_percent: typing.Optional[float] = _key("cpuPercent")
    cpu_time_ms: typing.Optional[float] = _key("cpuTimeMs")
    device: typing.Optional[DeviceMetadata] = _key("device")
    command: str = _text("command")
    timestamp: typing.Optional[datetime] = _key("timestamp")

    def to_dict(self):
        return _encode(self)

    @classmethod
    def from_dict(cls, data):
        kwargs = _decode_common(_decode_kwargs(cls, data))
        if "launch_args" in kwargs:
            kwargs["launch_args"] = tuple(kwargs["launch_args"])
        return cls(**kwargs)


@dataclasses.dataclass(frozen=True)
class Result:
    component: str = _text("component")
    android: typing.Optional[AndroidMetrics] = _key("android")
    ios: typing.Optional[IOSMetrics] = _key("ios")
    cli_command: str = _text("cliCommand")

    def to_dict(self):
        # the component label is always written, even when empty
        data = {"component": self.component}
        data.update(_encode(self))
        return data

    @classmethod
    def from_dict(cls, data):
        kwargs = _decode_kwargs(cls, data)
        if kwargs.get("android") is not None:
            kwargs["android"] = AndroidMetrics.from_dict(kwargs["android"])
        if kwargs.get("ios") is not None:
            kwargs["ios"] = IOSMetrics.from_dict(kwargs["ios"])
        return cls(**kwargs)


def to_json(result: Result) -> str:
    return json.dumps(result.to_dict(), indent=2) + "\n"


def from_json(text: str) -> Result:
    return Result.from_dict(json.loads(text))


def _fmt(value, unit):
    if value is None:
        return PLACEHOLDER
    return f"{value:.1f}{unit}"


def _model(metrics):
    if metrics.device is not None and metrics.device.model:
        return metrics.device.model
    return PLACEHOLDER


def _resource_figures(metrics):
    return "memory={} cpu={} cpuTime={}".format(
        _fmt(metrics.memory_mb, "MB"),
        _fmt(metrics.cpu_percent, "%"),
        _fmt(metrics.cpu_time_ms, "ms"),
    )


def format_summary(result: Result) -> str:
    """Short human-readable summary, one line per measured platform."""
    out = f"Component: {result.component}\n"
    if result.android is not None:
        android = result.android
        out += "  Android[{}]: total={} firstFrame={} wait={} {}\n".format(
            _model(android),
            _fmt(android.total_time_ms, "ms"),
            _fmt(android.first_frame_ms, "ms"),
            _fmt(android.wait_time_ms, "ms"),
            _resource_figures(android),
        )
    if result.ios is not None:
        ios = result.ios
        out += "  iOS[{}]: render={} {}\n".format(
            _model(ios),
            _fmt(ios.render_time_ms, "ms"),
            _resource_figures(ios),
        )
    return out
