#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import re

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser

SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(bytes|kib|kb|mib|mb|gib|gb|b)", re.IGNORECASE)

TO_MB = {
    "bytes": 1.0 / (1024 * 1024),
    "b": 1.0 / (1024 * 1024),
    "kb": 1.0 / 1024,
    "kib": 1.0 / 1024,
    "mb": 1.0,
    "mib": 1.0,
    "gb": 1024.0,
    "gib": 1024.0,
}


def size_to_mb(text):
    match = SIZE_RE.search(text)
    if not match:
        raise MetricNotFoundError(f"size pattern not found in '{text}'")
    return float(match.group(1)) * TO_MB[match.group(2).lower()]


class MemoryUsageParser(Parser):
    """Physical footprint from `simctl spawn <device> memory_usage -b <bundle>`."""

    def parse(self, stdout, stderr, returncode):
        for line in stdout:
            lower = line.lower()
            if "physical" in lower and "footprint" in lower:
                try:
                    return {"memory_mb": size_to_mb(line)}
                except MetricNotFoundError:
                    continue
        raise MetricNotFoundError("physical footprint not found")
