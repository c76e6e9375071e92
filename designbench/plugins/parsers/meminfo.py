#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser, to_float

KB_SUFFIXES = ("kB", "KB", "kb")


def _first_kb_value(line):
    if ":" in line:
        line = line.split(":", 1)[1]
    for field in line.split():
        for suffix in KB_SUFFIXES:
            if field.endswith(suffix):
                field = field[: -len(suffix)]
                break
        value = to_float(field)
        if value is not None:
            return value
    return None


class MeminfoParser(Parser):
    """Total PSS of a package from `dumpsys meminfo <package>`, in MB.

    A "TOTAL PSS:" line wins over the "TOTAL" row of the per-heap table.
    """

    def parse(self, stdout, stderr, returncode):
        total = None
        for line in stdout:
            line = line.strip()
            upper = line.upper()
            if not upper.startswith("TOTAL"):
                continue
            value = _first_kb_value(line)
            if value is None:
                continue
            if upper.startswith("TOTAL PSS"):
                return {"memory_mb": value / 1024.0}
            if total is None:
                total = value
        if total is None:
            raise MetricNotFoundError(
                "unable to locate TOTAL memory usage in dumpsys output"
            )
        return {"memory_mb": total / 1024.0}
