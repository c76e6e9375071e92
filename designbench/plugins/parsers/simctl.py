#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import json
import typing

from designbench.lib.errors import ParseError
from designbench.lib.parser import Parser

RUNTIME_PREFIX = "com.apple.CoreSimulator.SimRuntime."

PLATFORM_NAMES = {
    "ios": "iOS",
    "ipados": "iPadOS",
    "tvos": "tvOS",
}


class SimDevice(typing.NamedTuple):
    udid: str
    name: str = ""
    state: str = ""
    device_type: str = ""
    runtime: str = ""


def runtime_to_version(runtime: str) -> str:
    """Turn "com.apple.CoreSimulator.SimRuntime.iOS-17-2" into "iOS 17.2"."""
    if runtime.startswith(RUNTIME_PREFIX):
        runtime = runtime[len(RUNTIME_PREFIX) :]
    parts = runtime.replace("_", "-").split("-")
    if len(parts) < 2:
        return runtime.strip()
    name = parts[0]
    version = ".".join(parts[1:])
    lower = name.lower()
    name = PLATFORM_NAMES.get(lower, lower[:1].upper() + lower[1:])
    return f"{name} {version}".strip()


class SimctlDevicesParser(Parser):
    """Flattens `simctl list devices --json` into udid -> SimDevice.

    The JSON groups devices by runtime identifier; the runtime is copied
    onto each device.
    """

    def parse(self, stdout, stderr, returncode):
        try:
            payload = json.loads("\n".join(stdout))
        except json.JSONDecodeError as e:
            raise ParseError(f"decode simctl json: {e}") from e
        if not isinstance(payload, dict):
            raise ParseError("decode simctl json: top level is not an object")

        groups = payload.get("devices") or {}
        if not isinstance(groups, dict):
            raise ParseError("decode simctl json: \"devices\" is not an object")

        devices = {}
        for runtime, entries in groups.items():
            entries = entries or []
            if not isinstance(entries, list):
                raise ParseError(f"decode simctl json: {runtime} is not a list")
            for entry in entries:
                if not isinstance(entry, dict):
                    raise ParseError(f"decode simctl json: bad device under {runtime}")
                udid = entry.get("udid", "")
                if not udid:
                    continue
                devices[udid] = SimDevice(
                    udid=udid,
                    name=entry.get("name", ""),
                    state=entry.get("state", ""),
                    device_type=entry.get("deviceTypeIdentifier", ""),
                    runtime=runtime,
                )
        return {"devices": devices}
