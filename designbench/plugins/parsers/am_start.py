#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.parser import Parser, to_float

# am start -W key -> metrics key
TIMING_KEYS = {
    "ThisTime": "first_frame_ms",
    "TotalTime": "total_time_ms",
    "WaitTime": "wait_time_ms",
}


class AmStartParser(Parser):
    """Extracts launch timings from `am start -W`.

    Unknown keys and malformed numbers are skipped, so a launch that reports
    no timings yields an empty dict rather than an error.
    """

    def parse(self, stdout, stderr, returncode):
        metrics = {}
        for line in stdout:
            line = line.strip()
            if ":" not in line:
                continue
            key, value = [part.strip() for part in line.split(":", 1)]
            if key in TIMING_KEYS:
                number = to_float(value)
                if number is not None:
                    metrics[TIMING_KEYS[key]] = number
            elif key == "LaunchState":
                metrics["launch_state"] = value
        return metrics
