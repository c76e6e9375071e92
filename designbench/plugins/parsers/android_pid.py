#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser


class PidofParser(Parser):
    """First pid printed by `pidof <package>`."""

    def parse(self, stdout, stderr, returncode):
        for line in stdout:
            fields = line.split()
            if fields and fields[0].isdigit():
                return {"pid": fields[0]}
        raise MetricNotFoundError("pidof returned no pid")


class PsPidParser(Parser):
    """Finds the pid of a package in a `ps` process listing.

    Toybox ps puts USER before PID, so the pid is the first all-digit field
    of the matching line rather than strictly the first column.
    """

    def __init__(self, package):
        self.package = package

    def parse(self, stdout, stderr, returncode):
        for line in stdout:
            if self.package not in line:
                continue
            fields = line.split()
            if len(fields) < 2:
                continue
            for field in fields:
                if field.isdigit():
                    return {"pid": field}
        raise MetricNotFoundError(f"process for {self.package} not found")
