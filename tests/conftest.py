#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import pytest
from designbench.lib import util
from designbench.lib.errors import ToolInvocationError

AM_START_OUTPUT = """\
Starting: Intent { act=android.intent.action.MAIN cmp=com.example.app/.MainActivity }
Status: ok
LaunchState: COLD
Activity: com.example.app/.MainActivity
ThisTime: 8
TotalTime: 12
WaitTime: 14
Complete
"""

MEMINFO_OUTPUT = """\
Applications Memory Usage (kB):
Uptime: 123456 Realtime: 123456

** MEMINFO in pid 4242 [com.example.app] **
                    Pss  Private
           Dalvik  1024   512
            TOTAL  4096   2048
"""

CPUINFO_OUTPUT = """\
Load: 5.00 / 3.00 / 2.00
CPU usage from 10000ms to 0ms ago:
  10% 4242/com.example.app: 8% user + 2% kernel
  3% 1000/system_server: 2% user + 1% kernel
"""

TOP_OUTPUT = """\
Tasks: 1 total
PID   CPU%   NAME
4242  10%   com.example.app
"""

PS_OUTPUT = """\
USER           PID  PPID     VSZ    RSS WCHAN            ADDR S NAME
root             1     0 1234567   4321 0                   0 S init
u0_a123       4242   600 9876543  65432 0                   0 S com.example.app
"""

PROC_STAT_OUTPUT = (
    "4242 (mock) S 0 0 0 0 0 0 0 0 0 0 100 50 0 0 0 0 0 0 0 0 0 0 0 0\n"
)

ADB_DEVICES_OUTPUT = """\
List of devices attached
emulator-5554          device product:sdk_gphone64 model:Pixel_Mock device:emu64a transport_id:1
"""

SIMCTL_JSON = """\
{
  "devices" : {
    "com.apple.CoreSimulator.SimRuntime.iOS-17-2" : [
      {
        "udid" : "AAAA-1111",
        "isAvailable" : true,
        "deviceTypeIdentifier" : "com.apple.CoreSimulator.SimDeviceType.iPhone-15",
        "state" : "Shutdown",
        "name" : "iPhone 15"
      },
      {
        "udid" : "BBBB-2222",
        "isAvailable" : true,
        "deviceTypeIdentifier" : "com.apple.CoreSimulator.SimDeviceType.iPhone-15-Pro",
        "state" : "Booted",
        "name" : "iPhone 15 Pro"
      }
    ],
    "com.apple.CoreSimulator.SimRuntime.tvOS-17-0" : []
  }
}
"""

MEMORY_USAGE_OUTPUT = """\
Process: DemoApp [4321]
Physical footprint:         52.3 MB
Physical footprint (peak):  60.1 MB
"""

LAUNCHCTL_OUTPUT = """\
PID\tStatus\tLabel
-\t0\tcom.apple.other
4321\t0\tUIKitApplication:com.example.demo[0x1a2b][rb-legacy]
"""

DARWIN_PS_OUTPUT = """\
  PID  %CPU      TIME
 4321  12.5   0:01.50
"""


class FakeTools(object):
    """Stands in for util.run_tool and answers from a table of outputs.

    Keys are argument tuples without the device selector. A value may be an
    output string, an exception instance to raise, or a callable taking the
    argument list. Unknown invocations fail like a non-zero exit.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, binary, args, device_args=None, env=None, deadline=None):
        args = list(args)
        cmd = [binary] + list(device_args or []) + args
        self.calls.append({"cmd": cmd, "args": args, "env": env})
        response = self.responses.get(tuple(args))
        if callable(response) and not isinstance(response, Exception):
            response = response(args)
        if response is None:
            raise ToolInvocationError(
                "'{}' returned non-zero exit status 1".format(" ".join(cmd)),
                cmd,
                returncode=1,
            )
        if isinstance(response, Exception):
            raise response
        return util.ToolResult(cmd, response, 0)

    def called(self, *args):
        return any(tuple(call["args"]) == args for call in self.calls)


def android_responses(package="com.example.app"):
    return {
        ("shell", "am", "start", "-W", f"{package}/.MainActivity"): AM_START_OUTPUT,
        ("shell", "getprop", "ro.product.model"): "Pixel Mock\n",
        ("shell", "getprop", "ro.build.version.release"): "14\n",
        ("shell", "wm", "size"): "Physical size: 1080x2400\n",
        ("shell", "dumpsys", "meminfo", package): MEMINFO_OUTPUT,
        ("shell", "pidof", package): "4242\n",
        ("shell", "ps"): PS_OUTPUT,
        ("shell", "top", "-b", "-n", "1", "-p", "4242"): TOP_OUTPUT,
        ("shell", "dumpsys", "cpuinfo"): CPUINFO_OUTPUT,
        ("shell", "cat", "/proc/4242/stat"): PROC_STAT_OUTPUT,
        ("devices", "-l"): ADB_DEVICES_OUTPUT,
    }


def ios_responses(device="BBBB-2222", bundle="com.example.demo"):
    return {
        ("simctl", "list", "devices", "--json"): SIMCTL_JSON,
        ("simctl", "launch", device, bundle): f"{bundle}: 4321\n",
        ("simctl", "spawn", device, "memory_usage", "-b", bundle): MEMORY_USAGE_OUTPUT,
        ("simctl", "spawn", device, "launchctl", "list"): LAUNCHCTL_OUTPUT,
        (
            "simctl",
            "spawn",
            device,
            "ps",
            "-o",
            "pid,pcpu,time",
            "-p",
            "4321",
        ): DARWIN_PS_OUTPUT,
    }


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(util, "run_tool", tools)
    return tools
