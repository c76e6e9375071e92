#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import enum
import logging
import shutil
import typing

from designbench.lib import project, util
from designbench.lib.errors import DesignbenchError

from .parser_factory import ParserFactory

logger = logging.getLogger(__name__)


class Status(enum.Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class ChecklistItem(typing.NamedTuple):
    name: str
    status: Status
    notes: typing.Tuple[str, ...] = ()


def _parse(parser_name, result):
    return ParserFactory.create(parser_name).parse(
        result.lines(), [], result.returncode
    )


def detect_android_device(adb_path, deadline=None):
    result = util.run_tool(adb_path, ["devices", "-l"], deadline=deadline)
    return _parse("adb_devices", result)["device"]


def detect_ios_device(xcrun_path, deadline=None):
    result = util.run_tool(
        xcrun_path, ["simctl", "list", "devices", "--json"], deadline=deadline
    )
    for device in _parse("simctl_devices", result)["devices"].values():
        if device.state.lower() == "booted":
            return device
    return None


def check_binary(label, path) -> ChecklistItem:
    if not (path or "").strip():
        return ChecklistItem(label, Status.FAIL, ("no path configured",))
    resolved = shutil.which(path)
    if resolved is None:
        return ChecklistItem(label, Status.FAIL, (f"{path} not found in PATH",))
    return ChecklistItem(label, Status.PASS, (f"path: {resolved}",))


def check_android_project(root) -> ChecklistItem:
    name = "Android project"
    try:
        proj = project.detect_android_project(root)
    except DesignbenchError as e:
        return ChecklistItem(name, Status.FAIL, (str(e),))
    notes = []
    if proj.package:
        notes.append(f"Package: {proj.package}")
    if proj.activity:
        notes.append(f"Activity: {proj.activity}")
    if proj.module_dir:
        notes.append(f"Gradle module: {proj.module_dir}")
    notes.extend(proj.warnings)
    status = Status.PASS if proj.package else Status.WARN
    return ChecklistItem(name, status, tuple(notes))


def check_android_device(adb_path, deadline=None) -> ChecklistItem:
    name = "Android device detected"
    try:
        device = detect_android_device(adb_path, deadline)
    except DesignbenchError as e:
        return ChecklistItem(name, Status.FAIL, (str(e),))
    desc = device.id
    if device.model:
        desc = f"{device.id} ({device.model})"
    notes = [desc]
    if device.product:
        notes.append(f"Product: {device.product}")
    return ChecklistItem(name, Status.PASS, tuple(notes))


def check_ios_project(root) -> ChecklistItem:
    name = "iOS project"
    try:
        proj = project.detect_ios_project(root)
    except DesignbenchError as e:
        return ChecklistItem(name, Status.FAIL, (str(e),))
    return ChecklistItem(
        name,
        Status.PASS,
        (f"Bundle ID: {proj.bundle_id}", f"Info.plist: {proj.info_plist_path}"),
    )


def check_ios_device(xcrun_path, deadline=None) -> ChecklistItem:
    name = "iOS device detected"
    try:
        device = detect_ios_device(xcrun_path, deadline)
    except DesignbenchError as e:
        return ChecklistItem(name, Status.FAIL, (str(e),))
    if device is None:
        return ChecklistItem(
            name,
            Status.WARN,
            ("No booted simulator or connected device reported by xcrun.",),
        )
    desc = device.udid
    if device.name:
        desc = f"{device.udid} ({device.name})"
    if device.runtime:
        desc = f"{desc} - {device.runtime}"
    return ChecklistItem(name, Status.PASS, (desc,))


def run_checklist(root, adb_path="adb", xcrun_path="xcrun", deadline=None):
    """Every readiness check, in display order. Checks never raise."""
    return [
        check_binary("adb available", adb_path),
        check_binary("xcodebuild available", "xcodebuild"),
        check_binary("xcrun available", xcrun_path),
        check_android_project(root),
        check_android_device(adb_path, deadline),
        check_ios_project(root),
        check_ios_device(xcrun_path, deadline),
    ]
