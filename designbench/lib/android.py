#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import errno
import logging
import subprocess
import time
import typing

import click
from designbench.lib import util
from designbench.lib.errors import (
    best_effort,
    MetricNotFoundError,
    RequiredInputError,
    ToolInvocationError,
    ToolTimeoutError,
)
from designbench.lib.report import AndroidMetrics, DeviceMetadata

from .parser_factory import ParserFactory

logger = logging.getLogger(__name__)

COMPONENT_EXTRA_KEY = "designbench_component"


class AndroidConfig(typing.NamedTuple):
    package: str
    activity: str
    component: str = ""
    device_id: str = ""
    adb_path: str = "adb"
    launch_args: typing.Tuple[str, ...] = ()
    benchmark_component: str = ""
    component_extra_key: str = COMPONENT_EXTRA_KEY


def normalize_activity(package: str, activity: str) -> str:
    if not activity or activity.startswith("."):
        return activity
    if package and activity.startswith(package + "."):
        return activity[len(package) :]
    return activity


def build_component_arg(package: str, activity: str) -> str:
    """Component name passed to `am start`, e.g. "com.example/.MainActivity"."""
    if "/" in activity:
        return activity
    return "{}/{}".format(package, normalize_activity(package, activity))


class AndroidBenchmark(object):
    """Launches one activity with `am start -W` and gathers the metrics
    around it.

    Every adb call shares the same deadline. Device identity, memory and
    CPU probes are best effort: a failed tool or an unparseable output only
    leaves the field unset, while a deadline expiry aborts the run.

    Attributes:
        config (AndroidConfig): what to launch and on which device
        deadline (util.Deadline): command-wide deadline
    """

    def __init__(self, config: AndroidConfig, deadline=None) -> None:
        self.config = config
        self.deadline = deadline or util.Deadline()
        self.adb = config.adb_path or "adb"

    def _device_args(self):
        if self.config.device_id:
            return ["-s", self.config.device_id]
        return []

    def _adb(self, *args):
        return util.run_tool(
            self.adb, list(args), device_args=self._device_args(), deadline=self.deadline
        )

    def _parse(self, parser_name, result, *parser_args):
        parser = ParserFactory.create(parser_name, *parser_args)
        return parser.parse(result.lines(), [], result.returncode)

    def launch_args(self) -> typing.List[str]:
        args = [
            "shell",
            "am",
            "start",
            "-W",
            build_component_arg(self.config.package, self.config.activity),
        ]
        if self.config.benchmark_component:
            args += [
                "-e",
                self.config.component_extra_key,
                self.config.benchmark_component,
            ]
        return args + list(self.config.launch_args)

    def run(self) -> AndroidMetrics:
        if not self.config.package:
            raise RequiredInputError("android package name is required")
        if not self.config.activity:
            raise RequiredInputError("android activity is required")

        component = self.config.component or self.config.activity
        args = self.launch_args()
        logger.info('Launching "%s" on %s', component, self.config.device_id or "default device")
        result = self._adb(*args)
        timings = self._parse("am_start", result)
        timestamp = util.generate_timestamp()

        device = self.device_metadata()
        memory_mb = best_effort(self.memory_mb)
        cpu = best_effort(self.cpu_metrics) or {}

        return AndroidMetrics(
            component=component,
            activity=self.config.activity,
            package=self.config.package,
            benchmark_component=self.config.benchmark_component,
            first_frame_ms=timings.get("first_frame_ms"),
            total_time_ms=timings.get("total_time_ms"),
            wait_time_ms=timings.get("wait_time_ms"),
            launch_state=timings.get("launch_state", ""),
            memory_mb=memory_mb,
            cpu_percent=cpu.get("cpu_percent"),
            cpu_time_ms=cpu.get("cpu_time_ms"),
            device=device,
            command=" ".join(result.cmd),
            timestamp=timestamp,
        )

    def _getprop(self, key):
        return self._parse("getprop", self._adb("shell", "getprop", key))["value"]

    def _resolution(self):
        return self._parse("wm_size", self._adb("shell", "wm", "size"))["resolution"]

    def device_metadata(self) -> typing.Optional[DeviceMetadata]:
        """Model, OS version and resolution; None when nothing is known."""
        meta = DeviceMetadata(
            id=self.config.device_id,
            model=best_effort(self._getprop, "ro.product.model") or "",
            os_version=best_effort(self._getprop, "ro.build.version.release") or "",
            platform="android",
            resolution=best_effort(self._resolution) or "",
        )
        return meta.or_none()

    def memory_mb(self) -> float:
        result = self._adb("shell", "dumpsys", "meminfo", self.config.package)
        return self._parse("meminfo", result)["memory_mb"]

    def resolve_pid(self) -> str:
        package = self.config.package
        try:
            return self._parse("pidof", self._adb("shell", "pidof", package))["pid"]
        except (ToolInvocationError, MetricNotFoundError) as e:
            logger.debug("pidof %s failed (%s), scanning ps", package, e)
        return self._parse("ps_pid", self._adb("shell", "ps"), package)["pid"]

    def cpu_percent(self, pid: str) -> float:
        try:
            result = self._adb("shell", "top", "-b", "-n", "1", "-p", pid)
            return self._parse("top_cpu", result, pid)["cpu_percent"]
        except (ToolInvocationError, MetricNotFoundError) as e:
            logger.debug("top for pid %s unusable (%s), trying cpuinfo", pid, e)
        result = self._adb("shell", "dumpsys", "cpuinfo")
        return self._parse("cpuinfo", result, self.config.package)["cpu_percent"]

    def cpu_time_ms(self, pid: str) -> float:
        result = self._adb("shell", "cat", f"/proc/{pid}/stat")
        return self._parse("proc_stat", result)["cpu_time_ms"]

    def cpu_metrics(self) -> typing.Dict[str, float]:
        """CPU percent and cumulative CPU time of the launched package.

        The two are measured independently; this only fails if both do.
        """
        pid = self.resolve_pid()
        metrics = {}
        percent = best_effort(self.cpu_percent, pid)
        if percent is not None:
            metrics["cpu_percent"] = percent
        cpu_time = best_effort(self.cpu_time_ms, pid)
        if cpu_time is not None:
            metrics["cpu_time_ms"] = cpu_time
        if not metrics:
            raise MetricNotFoundError(f"cpu metrics unavailable for pid {pid}")
        return metrics


def default_install_task(module_dir: str) -> str:
    module = (module_dir or "").replace("\\", "/").strip("/")
    if not module:
        return "installRelease"
    return ":{}:installRelease".format(module.replace("/", ":"))


def install_release(gradle: str, task: str, root: str, deadline=None) -> None:
    """Run the Gradle install task in root, streaming its output."""
    args = task.split()
    if not args:
        raise RequiredInputError("install task cannot be empty")
    cmd = [gradle] + args
    cmd_str = " ".join(cmd)
    click.echo(f"Running {cmd_str} to install Android release benchmark build...")
    timeout = deadline.remaining() if deadline is not None else None
    start = time.monotonic()
    try:
        process = subprocess.Popen(cmd, cwd=root)
    except OSError as e:
        msg = f"could not run '{cmd_str}': {e.strerror or e}"
        if e.errno == errno.ENOENT:
            msg += " (is the Gradle wrapper present?)"
        raise ToolInvocationError(msg, cmd, errno=e.errno) from e
    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
        raise ToolTimeoutError(
            f"'{cmd_str}' timed out", cmd, deadline.seconds
        ) from None
    if returncode != 0:
        raise ToolInvocationError(
            f"gradle install failed: '{cmd_str}' returned non-zero exit status {returncode}",
            cmd,
            returncode=returncode,
        )
    logger.info("Gradle install finished in %.1fs", time.monotonic() - start)
