#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import time
import typing

from designbench.lib import util
from designbench.lib.errors import (
    best_effort,
    ParseError,
    RequiredInputError,
    ToolInvocationError,
)
from designbench.lib.report import DeviceMetadata, IOSMetrics
from designbench.plugins.parsers.simctl import runtime_to_version, SimDevice

from .parser_factory import ParserFactory

logger = logging.getLogger(__name__)

COMPONENT_ENV_VAR = "SIMCTL_CHILD_DESIGNBENCH_COMPONENT"

# simctl alias for the most recently booted simulator
BOOTED_TARGET = "booted"


class IOSConfig(typing.NamedTuple):
    bundle_id: str
    component: str = ""
    device_id: str = ""
    xcrun_path: str = "xcrun"
    launch_args: typing.Tuple[str, ...] = ()
    benchmark_component: str = ""
    component_env_var: str = COMPONENT_ENV_VAR


def device_to_metadata(device: SimDevice) -> DeviceMetadata:
    return DeviceMetadata(
        id=device.udid,
        model=device.name,
        os_version=runtime_to_version(device.runtime) if device.runtime else "",
        platform="ios",
        resolution=device.device_type,
    )


class IOSBenchmark(object):
    """Launches an app with `xcrun simctl launch` and times the call.

    Unlike Android there is no in-app timing: the render time is the wall
    clock duration of the launch command. Memory and CPU probes run inside
    the simulator through `simctl spawn` and are best effort.

    Attributes:
        config (IOSConfig): what to launch and on which simulator
        deadline (util.Deadline): command-wide deadline
    """

    def __init__(self, config: IOSConfig, deadline=None) -> None:
        self.config = config
        self.deadline = deadline or util.Deadline()
        self.xcrun = config.xcrun_path or "xcrun"

    def _xcrun(self, *args, env=None):
        return util.run_tool(self.xcrun, list(args), env=env, deadline=self.deadline)

    def _spawn(self, target, *args):
        return self._xcrun("simctl", "spawn", target or BOOTED_TARGET, *args)

    def _parse(self, parser_name, result, *parser_args):
        parser = ParserFactory.create(parser_name, *parser_args)
        return parser.parse(result.lines(), [], result.returncode)

    def list_devices(self) -> typing.Dict[str, SimDevice]:
        result = self._xcrun("simctl", "list", "devices", "--json")
        return self._parse("simctl_devices", result)["devices"]

    def resolve_device(self) -> DeviceMetadata:
        """Metadata for the requested simulator, or the first booted one.

        A requested id missing from the simulator list is assumed to be a
        physical device and gets minimal metadata. If listing fails and no id
        was requested the metadata is empty.
        """
        requested = self.config.device_id
        try:
            devices = self.list_devices()
        except (ToolInvocationError, ParseError):
            if not requested:
                logger.warning("Could not list simulators; device metadata is empty")
                return DeviceMetadata(platform="ios")
            raise

        if requested:
            if requested in devices:
                return device_to_metadata(devices[requested])
            return DeviceMetadata(id=requested, platform="ios")

        for device in devices.values():
            if device.state.lower() == "booted":
                return device_to_metadata(device)
        return DeviceMetadata(platform="ios")

    def run(self) -> IOSMetrics:
        if not self.config.bundle_id:
            raise RequiredInputError("ios bundle id is required")

        component = self.config.component or self.config.bundle_id
        device = self.resolve_device()
        if not device.id:
            raise RequiredInputError(
                "no booted simulator found; provide --device to target a "
                "specific simulator or device"
            )

        env = None
        if self.config.benchmark_component:
            env = {self.config.component_env_var: self.config.benchmark_component}
        args = ["simctl", "launch", device.id, self.config.bundle_id]
        args += list(self.config.launch_args)
        logger.info('Launching "%s" on %s', component, device.id)
        start = time.perf_counter()
        result = self._xcrun(*args, env=env)
        render_time_ms = (time.perf_counter() - start) * 1000.0
        timestamp = util.generate_timestamp()

        memory_mb = best_effort(self.memory_mb, device.id)
        cpu = best_effort(self.cpu_metrics, device.id) or {}

        return IOSMetrics(
            component=component,
            bundle_id=self.config.bundle_id,
            launch_args=tuple(self.config.launch_args),
            benchmark_component=self.config.benchmark_component,
            render_time_ms=render_time_ms,
            memory_mb=memory_mb,
            cpu_percent=cpu.get("cpu_percent"),
            cpu_time_ms=cpu.get("cpu_time_ms"),
            device=device,
            command=" ".join(result.cmd),
            timestamp=timestamp,
        )

    def memory_mb(self, target: str) -> float:
        result = self._spawn(target, "memory_usage", "-b", self.config.bundle_id)
        return self._parse("memory_usage", result)["memory_mb"]

    def resolve_pid(self, target: str) -> str:
        result = self._spawn(target, "launchctl", "list")
        return self._parse("launchctl_pid", result, self.config.bundle_id)["pid"]

    def cpu_metrics(self, target: str) -> typing.Dict[str, float]:
        pid = self.resolve_pid(target)
        result = self._spawn(target, "ps", "-o", "pid,pcpu,time", "-p", pid)
        return self._parse("darwin_ps", result, pid)
