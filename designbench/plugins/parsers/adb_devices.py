#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser


class AdbDevice(typing.NamedTuple):
    id: str
    model: str = ""
    product: str = ""


class AdbDevicesParser(Parser):
    """First ready device from `adb devices -l`.

    Lines after the "List of devices attached" header look like
    "emulator-5554  device product:sdk model:Pixel_7 transport_id:1".
    Devices in any state other than "device" (offline, unauthorized) are
    skipped.
    """

    def parse(self, stdout, stderr, returncode):
        for line in stdout[1:]:
            line = line.strip()
            if not line or line.startswith("*"):
                continue
            fields = line.split()
            if len(fields) < 2 or fields[1] != "device":
                continue
            attrs = dict(f.split(":", 1) for f in fields[2:] if ":" in f)
            return {
                "device": AdbDevice(
                    id=fields[0],
                    model=attrs.get("model", ""),
                    product=attrs.get("product", ""),
                )
            }
        raise MetricNotFoundError(
            "no Android devices found (ensure adb device is connected)"
        )
