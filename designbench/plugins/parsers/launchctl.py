#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser


class LaunchctlPidParser(Parser):
    """Pid of a bundle from `launchctl list` (PID Status Label).

    Services that are not running show "-" as pid and are skipped.
    """

    def __init__(self, bundle_id):
        self.bundle_id = bundle_id

    def parse(self, stdout, stderr, returncode):
        for line in stdout:
            fields = line.split()
            if len(fields) < 3:
                continue
            if self.bundle_id not in fields[-1]:
                continue
            if fields[0].isdigit():
                return {"pid": fields[0]}
        raise MetricNotFoundError("process pid not found via launchctl")
