#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# pyre-unsafe

"""Locate the Android manifest / iOS Info.plist of the project being
benchmarked and pull launch defaults out of them.
"""

import logging
import os
import plistlib
import re
import typing
import xml.etree.ElementTree as ET

from designbench.lib.errors import DesignbenchError

logger = logging.getLogger(__name__)

ANDROID_NS = "{http://schemas.android.com/apk/res/android}"

ANDROID_MANIFEST_PATHS = [
    "androidApp/src/main/AndroidManifest.xml",
    "androidApp/src/androidMain/AndroidManifest.xml",
    "app/src/main/AndroidManifest.xml",
    "AndroidManifest.xml",
]
ANDROID_SKIP_DIRS = {".git", "build", "gradle", ".gradle", ".idea", "node_modules"}

IOS_PLIST_PATHS = [
    "iosApp/iosApp/Info.plist",
    "iosApp/Info.plist",
    "ios/Info.plist",
]
IOS_SKIP_DIRS = {".git", "build", "DerivedData", ".idea", "Pods", "node_modules"}

GRADLE_BUILD_FILES = ["build.gradle.kts", "build.gradle"]
# how many directories above the manifest to search for a Gradle namespace
GRADLE_SEARCH_DEPTH = 6

_GRADLE_PACKAGE_RES = [
    re.compile(r'namespace\s*=\s*"([^"]+)"'),
    re.compile(r'namespace\s+"([^"]+)"'),
    re.compile(r'applicationId\s*=\s*"([^"]+)"'),
    re.compile(r'applicationId\s+"([^"]+)"'),
]


class ProjectNotFoundError(DesignbenchError):
    pass


class AndroidProject(typing.NamedTuple):
    package: str
    activity: str
    manifest_path: str
    module_dir: str = ""
    warnings: typing.Tuple[str, ...] = ()


class IOSProject(typing.NamedTuple):
    bundle_id: str
    info_plist_path: str


def _find_file(root, candidates, filename, skip_dirs, case_insensitive=False):
    for rel in candidates:
        path = os.path.join(root, rel)
        if os.path.isfile(path):
            return path
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skip_dirs)
        for name in sorted(filenames):
            if name == filename or (
                case_insensitive and name.lower() == filename.lower()
            ):
                return os.path.join(dirpath, name)
    return None


def _android_attr(element, name):
    value = element.get(ANDROID_NS + name)
    if value is None:
        value = element.get(name)
    return (value or "").strip()


def parse_manifest(path: str) -> typing.Tuple[str, str]:
    """Return (package, launcher activity) declared in an AndroidManifest.xml.

    The activity with both MAIN and LAUNCHER intent filters wins; otherwise
    the first declared activity is used.
    """
    try:
        tree = ET.parse(path)
    except (ET.ParseError, OSError) as e:
        raise ProjectNotFoundError(f"parse manifest xml {path}: {e}") from e
    root = tree.getroot()
    package = (root.get("package") or "").strip()

    activities = []
    for activity in root.iter("activity"):
        actions = set()
        categories = set()
        for intent_filter in activity.iter("intent-filter"):
            actions.update(_android_attr(a, "name") for a in intent_filter.iter("action"))
            categories.update(
                _android_attr(c, "name") for c in intent_filter.iter("category")
            )
        is_launcher = (
            "android.intent.action.MAIN" in actions
            and "android.intent.category.LAUNCHER" in categories
        )
        activities.append((_android_attr(activity, "name"), is_launcher))

    launcher = ""
    for name, is_launcher in activities:
        if is_launcher:
            launcher = name
            break
    else:
        if activities:
            launcher = activities[0][0]
    return package, launcher


def parse_gradle_package(content: str) -> str:
    for regex in _GRADLE_PACKAGE_RES:
        match = regex.search(content)
        if match:
            return match.group(1).strip()
    return ""


def _has_gradle_build(directory):
    return any(os.path.isfile(os.path.join(directory, f)) for f in GRADLE_BUILD_FILES)


def derive_gradle_package(manifest_path: str) -> str:
    directory = os.path.dirname(manifest_path)
    for _ in range(GRADLE_SEARCH_DEPTH):
        for name in GRADLE_BUILD_FILES:
            path = os.path.join(directory, name)
            if not os.path.isfile(path):
                continue
            with open(path, "r") as build_file:
                package = parse_gradle_package(build_file.read())
            if package:
                return package
        parent = os.path.dirname(directory)
        if parent == directory:
            break
        directory = parent
    return ""


def resolve_module_dir(manifest_path: str, root: str) -> str:
    """Gradle module owning the manifest, relative to root ("" for root)."""
    root = os.path.abspath(root)
    directory = os.path.dirname(os.path.abspath(manifest_path))
    while True:
        if _has_gradle_build(directory):
            rel = os.path.relpath(directory, root)
            return "" if rel == "." else rel
        if directory == root:
            return ""
        parent = os.path.dirname(directory)
        if parent == directory:
            return ""
        directory = parent


def detect_android_project(root: str) -> AndroidProject:
    root = os.path.abspath(root)
    manifest = _find_file(
        root,
        ANDROID_MANIFEST_PATHS,
        "AndroidManifest.xml",
        ANDROID_SKIP_DIRS,
        case_insensitive=True,
    )
    if manifest is None:
        raise ProjectNotFoundError("android manifest not found")

    package, activity = parse_manifest(manifest)
    warnings = []
    if not package:
        package = derive_gradle_package(manifest)
        if package:
            warnings.append(f'manifest missing package; using Gradle namespace "{package}"')
        else:
            warnings.append(f"package attribute missing in {manifest}")
    for warning in warnings:
        logger.warning(warning)
    return AndroidProject(
        package=package,
        activity=activity,
        manifest_path=manifest,
        module_dir=resolve_module_dir(manifest, root),
        warnings=tuple(warnings),
    )


def parse_info_plist(path: str) -> IOSProject:
    try:
        with open(path, "rb") as plist_file:
            plist = plistlib.load(plist_file)
    except (plistlib.InvalidFileException, OSError, ValueError) as e:
        raise ProjectNotFoundError(f"read info.plist {path}: {e}") from e
    bundle_id = str(plist.get("CFBundleIdentifier", "")).strip()
    if not bundle_id:
        raise ProjectNotFoundError(f"CFBundleIdentifier not found in {path}")
    return IOSProject(bundle_id=bundle_id, info_plist_path=path)


def detect_ios_project(root: str) -> IOSProject:
    plist = _find_file(
        os.path.abspath(root), IOS_PLIST_PATHS, "Info.plist", IOS_SKIP_DIRS
    )
    if plist is None:
        raise ProjectNotFoundError("info.plist not found")
    return parse_info_plist(plist)
