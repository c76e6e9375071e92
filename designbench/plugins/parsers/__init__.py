#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .adb_devices import AdbDevicesParser
from .am_start import AmStartParser
from .android_cpu import CpuinfoParser, ProcStatParser, TopCpuParser
from .android_pid import PidofParser, PsPidParser
from .darwin_ps import DarwinPsParser
from .getprop import GetpropParser, WmSizeParser
from .launchctl import LaunchctlPidParser
from .meminfo import MeminfoParser
from .memory_usage import MemoryUsageParser
from .simctl import SimctlDevicesParser


def register_parsers(factory):
    factory.register("adb_devices", AdbDevicesParser)
    factory.register("am_start", AmStartParser)
    factory.register("getprop", GetpropParser)
    factory.register("wm_size", WmSizeParser)
    factory.register("meminfo", MeminfoParser)
    factory.register("pidof", PidofParser)
    factory.register("ps_pid", PsPidParser)
    factory.register("top_cpu", TopCpuParser)
    factory.register("cpuinfo", CpuinfoParser)
    factory.register("proc_stat", ProcStatParser)
    factory.register("simctl_devices", SimctlDevicesParser)
    factory.register("memory_usage", MemoryUsageParser)
    factory.register("launchctl_pid", LaunchctlPidParser)
    factory.register("darwin_ps", DarwinPsParser)
