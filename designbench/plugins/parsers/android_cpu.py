#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# pyre-unsafe

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser, to_float

# USER_HZ on every Android kernel we care about
CLOCK_TICKS_PER_SECOND = 100.0

CPU_COLUMNS = ("%CPU", "CPU%", "[%CPU]")
# toybox top prints the state and %CPU under one "S[%CPU]" heading
MERGED_STATE_COLUMN = "S[%CPU]"


class TopCpuParser(Parser):
    """CPU percent of one pid from `top -b -n 1 -p <pid>`.

    Uses the first value carrying a % sign on the pid's row; when values are
    bare numbers the %CPU column position is taken from the header row.
    """

    def __init__(self, pid):
        self.pid = str(pid)

    def parse(self, stdout, stderr, returncode):
        cpu_column = None
        for line in stdout:
            fields = line.split()
            if not fields:
                continue
            if "PID" in fields:
                for i, name in enumerate(fields):
                    if name in CPU_COLUMNS:
                        cpu_column = i
                    elif name == MERGED_STATE_COLUMN:
                        cpu_column = i + 1
                continue
            if fields[0] != self.pid:
                continue
            for field in fields[1:]:
                if "%" in field:
                    value = to_float(field.rstrip("%"))
                    if value is not None:
                        return {"cpu_percent": value}
            if cpu_column is not None and cpu_column < len(fields):
                value = to_float(fields[cpu_column])
                if value is not None:
                    return {"cpu_percent": value}
        raise MetricNotFoundError(f"pid {self.pid} not present in top output")


class CpuinfoParser(Parser):
    """CPU percent of a package from `dumpsys cpuinfo`.

    Rows look like "10% 4242/com.example.app: 8% user + 2% kernel".
    """

    def __init__(self, package):
        self.package = package

    def parse(self, stdout, stderr, returncode):
        for line in stdout:
            line = line.strip()
            if not line or self.package not in line:
                continue
            value = to_float(line.split()[0].rstrip("%"))
            if value is not None:
                return {"cpu_percent": value}
        raise MetricNotFoundError(f"{self.package} not present in cpuinfo output")


class ProcStatParser(Parser):
    """Cumulative CPU time from /proc/<pid>/stat, in milliseconds.

    utime and stime are fields 14 and 15. Fields are counted after the
    closing parenthesis of comm, which may itself contain spaces.
    """

    def parse(self, stdout, stderr, returncode):
        text = " ".join(stdout).strip()
        if ")" in text:
            # state is field 3, so utime/stime sit at offsets 11/12
            fields = text[text.rindex(")") + 1 :].split()
            offset = 11
        else:
            fields = text.split()
            offset = 13
        if len(fields) < offset + 2:
            raise MetricNotFoundError("unexpected /proc stat format")
        utime = to_float(fields[offset])
        stime = to_float(fields[offset + 1])
        if utime is None or stime is None:
            raise MetricNotFoundError("unexpected /proc stat format")
        ticks = utime + stime
        return {"cpu_time_ms": ticks / CLOCK_TICKS_PER_SECOND * 1000.0}
