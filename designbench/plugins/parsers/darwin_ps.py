#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser, to_float


def parse_darwin_time(value):
    """Convert a ps TIME column (MM:SS, HH:MM:SS or D-HH:MM:SS) to ms.

    Seconds may carry a fractional part ("0:01.52").
    """
    days = 0.0
    core = value.strip()
    if "-" in core:
        day_part, core = core.split("-", 1)
        days = to_float(day_part)
        if days is None:
            raise MetricNotFoundError(f"invalid day in time '{value}'")
    parts = [to_float(p) for p in core.split(":")]
    if None in parts or len(parts) not in (2, 3):
        raise MetricNotFoundError(f"unsupported time format '{value}'")
    if len(parts) == 2:
        parts.insert(0, 0.0)
    hours, minutes, seconds = parts
    hours += days * 24
    return (hours * 3600 + minutes * 60 + seconds) * 1000.0


class DarwinPsParser(Parser):
    """CPU percent and cumulative CPU time from `ps -o pid,pcpu,time -p <pid>`."""

    def __init__(self, pid):
        self.pid = str(pid)

    def parse(self, stdout, stderr, returncode):
        rows = [line.split() for line in stdout if line.strip()]
        # first row is the PID %CPU TIME header
        for fields in rows[1:]:
            if len(fields) < 3 or fields[0] != self.pid:
                continue
            cpu_percent = to_float(fields[1])
            if cpu_percent is None:
                raise MetricNotFoundError(f"invalid %CPU value '{fields[1]}'")
            return {
                "cpu_percent": cpu_percent,
                "cpu_time_ms": parse_darwin_time(fields[2]),
            }
        raise MetricNotFoundError("cpu metrics not found in ps output")
