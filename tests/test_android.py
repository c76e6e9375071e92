#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys

import pytest
from designbench.lib import android, util
from designbench.lib.errors import (
    RequiredInputError,
    ToolInvocationError,
    ToolTimeoutError,
)

from tests.conftest import android_responses

PACKAGE = "com.example.app"
LAUNCH = ("shell", "am", "start", "-W", f"{PACKAGE}/.MainActivity")


def make_benchmark(**overrides):
    fields = dict(package=PACKAGE, activity=".MainActivity", component="Home")
    fields.update(overrides)
    return android.AndroidBenchmark(android.AndroidConfig(**fields), util.Deadline(60))


def test_full_run(fake_tools):
    fake_tools.responses.update(android_responses())
    metrics = make_benchmark(device_id="emulator-5554").run()

    assert metrics.component == "Home"
    assert metrics.first_frame_ms == 8.0
    assert metrics.total_time_ms == 12.0
    assert metrics.wait_time_ms == 14.0
    assert metrics.launch_state == "COLD"
    assert metrics.memory_mb == 4.0
    assert metrics.cpu_percent == 10.0
    assert metrics.cpu_time_ms == 1500.0
    assert metrics.device.id == "emulator-5554"
    assert metrics.device.model == "Pixel Mock"
    assert metrics.device.os_version == "14"
    assert metrics.device.resolution == "1080x2400"
    assert metrics.command == (
        "adb -s emulator-5554 shell am start -W com.example.app/.MainActivity"
    )
    assert metrics.timestamp is not None
    assert all(call["cmd"][1:3] == ["-s", "emulator-5554"] for call in fake_tools.calls)


def test_launch_is_first_call(fake_tools):
    fake_tools.responses.update(android_responses())
    make_benchmark().run()
    assert tuple(fake_tools.calls[0]["args"]) == LAUNCH
    assert fake_tools.calls[0]["cmd"][0] == "adb"


def test_benchmark_component_extra(fake_tools):
    fake_tools.responses.update(android_responses())
    fake_tools.responses[LAUNCH + ("-e", "designbench_component", "Hero")] = (
        fake_tools.responses[LAUNCH]
    )
    metrics = make_benchmark(benchmark_component="Hero").run()
    assert metrics.benchmark_component == "Hero"
    assert metrics.command.endswith("-e designbench_component Hero")


def test_launch_args_appended(fake_tools):
    fake_tools.responses.update(android_responses())
    fake_tools.responses[LAUNCH + ("--ez", "trace", "true")] = fake_tools.responses[
        LAUNCH
    ]
    metrics = make_benchmark(launch_args=("--ez", "trace", "true")).run()
    assert metrics.command.endswith("--ez trace true")


def test_pid_falls_back_to_ps(fake_tools):
    responses = android_responses()
    del responses[("shell", "pidof", PACKAGE)]
    fake_tools.responses.update(responses)
    metrics = make_benchmark().run()
    assert fake_tools.called("shell", "ps")
    assert metrics.cpu_time_ms == 1500.0


def test_cpu_percent_falls_back_to_cpuinfo(fake_tools):
    responses = android_responses()
    responses[("shell", "top", "-b", "-n", "1", "-p", "4242")] = "Tasks: 0 total\n"
    fake_tools.responses.update(responses)
    metrics = make_benchmark().run()
    assert fake_tools.called("shell", "dumpsys", "cpuinfo")
    assert metrics.cpu_percent == 10.0


def test_cpu_time_without_percent(fake_tools):
    responses = android_responses()
    del responses[("shell", "top", "-b", "-n", "1", "-p", "4242")]
    del responses[("shell", "dumpsys", "cpuinfo")]
    fake_tools.responses.update(responses)
    metrics = make_benchmark().run()
    assert metrics.cpu_percent is None
    assert metrics.cpu_time_ms == 1500.0


def test_optional_probes_absent(fake_tools):
    fake_tools.responses[LAUNCH] = "Status: ok\nTotalTime: 20\n"
    metrics = make_benchmark().run()
    assert metrics.total_time_ms == 20.0
    assert metrics.first_frame_ms is None
    assert metrics.memory_mb is None
    assert metrics.cpu_percent is None
    assert metrics.cpu_time_ms is None
    assert metrics.device is None


def test_memory_zero_is_kept(fake_tools):
    responses = android_responses()
    responses[("shell", "dumpsys", "meminfo", PACKAGE)] = "TOTAL 0 0\n"
    fake_tools.responses.update(responses)
    assert make_benchmark().run().memory_mb == 0.0


def test_timeout_in_optional_probe_aborts(fake_tools):
    responses = android_responses()
    responses[("shell", "dumpsys", "meminfo", PACKAGE)] = ToolTimeoutError(
        "timed out", ["adb"], 60
    )
    fake_tools.responses.update(responses)
    with pytest.raises(ToolTimeoutError):
        make_benchmark().run()


def test_launch_failure_is_fatal(fake_tools):
    with pytest.raises(ToolInvocationError):
        make_benchmark().run()


@pytest.mark.parametrize(
    "overrides,message",
    [({"package": ""}, "package"), ({"activity": ""}, "activity")],
)
def test_required_inputs(fake_tools, overrides, message):
    with pytest.raises(RequiredInputError, match=message):
        make_benchmark(**overrides).run()
    assert fake_tools.calls == []


@pytest.mark.parametrize(
    "package,activity,expected",
    [
        ("com.example", ".MainActivity", "com.example/.MainActivity"),
        ("com.example", "com.example.ui.Main", "com.example/.ui.Main"),
        ("com.example", "org.other.Main", "com.example/org.other.Main"),
        ("com.example", "com.other/.Main", "com.other/.Main"),
    ],
)
def test_build_component_arg(package, activity, expected):
    assert android.build_component_arg(package, activity) == expected


def test_default_install_task():
    assert android.default_install_task("") == "installRelease"
    assert android.default_install_task("app") == ":app:installRelease"
    assert android.default_install_task("apps/demo/") == ":apps:demo:installRelease"


def test_install_release_runs_in_root(tmp_path):
    marker = tmp_path / "installed"
    # the task string is split on whitespace
    script = "open({!r},'w').close()".format(marker.name)
    android.install_release(sys.executable, f"-c {script}", str(tmp_path))
    assert marker.exists()


def test_install_release_failure(tmp_path):
    with pytest.raises(ToolInvocationError, match="gradle install failed"):
        android.install_release(sys.executable, "-c raise", str(tmp_path))


def test_install_release_empty_task(tmp_path):
    with pytest.raises(RequiredInputError):
        android.install_release(sys.executable, "  ", str(tmp_path))
