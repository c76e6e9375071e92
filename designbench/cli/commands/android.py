#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import os

from designbench.lib import android, project
from designbench.lib.errors import DesignbenchError, RequiredInputError
from designbench.lib.report import Result

from .command import DesignbenchCommand, make_deadline, publish, resolve_component

logger = logging.getLogger(__name__)


def add_android_arguments(parser, device_flag="--device"):
    parser.add_argument("--package", default="", help="Android application id")
    parser.add_argument(
        "--activity",
        default="",
        help="activity to launch, e.g. .MainActivity or com.example/.MainActivity",
    )
    parser.add_argument(
        device_flag,
        dest="android_device",
        default="",
        help="adb serial of the target device (adb -s)",
    )
    parser.add_argument("--adb", default=None, help="path to the adb binary")


def resolve_android_inputs(args, root, need_project=False):
    """Fill missing --package/--activity from the Android project in root.

    Returns the detected project or None if it was not needed or not found.
    """
    detected = None
    detect_error = None
    missing = not args.package.strip() or not args.activity.strip()
    if missing or need_project:
        try:
            detected = project.detect_android_project(root)
        except DesignbenchError as e:
            detect_error = e
    if not missing:
        return detected
    if detected is not None:
        args.package = args.package.strip() or detected.package
        args.activity = args.activity.strip() or detected.activity
    if args.package and args.activity:
        return detected
    if detect_error is not None:
        raise RequiredInputError(
            f"unable to auto-detect Android defaults: {detect_error} "
            "(set --package/--activity manually)"
        )
    flags = [
        flag
        for flag, value in (("--package", args.package), ("--activity", args.activity))
        if not value
    ]
    raise RequiredInputError(
        "missing Android {} (run from project root or provide flags)".format(
            " and ".join(flags)
        )
    )


def android_config(args, conf, component):
    return android.AndroidConfig(
        package=args.package,
        activity=args.activity,
        component=component,
        device_id=args.android_device,
        adb_path=args.adb or conf.adb_path or "adb",
        launch_args=tuple(args.launch_arg or ()),
        benchmark_component=args.view or "",
        component_extra_key=conf.component_extra_key or android.COMPONENT_EXTRA_KEY,
    )


class AndroidCommand(DesignbenchCommand):
    def populate_parser(self, subparsers):
        parser = subparsers.add_parser("android", help="run Android render benchmark")
        parser.set_defaults(command=self)
        add_android_arguments(parser)
        parser.add_argument(
            "--install",
            action="store_true",
            help="run the detected Gradle installRelease task before benchmarking",
        )
        parser.add_argument("--gradle", default=None, help="path to the Gradle wrapper")
        parser.add_argument(
            "--install-task",
            default="",
            help="Gradle task used by --install, e.g. :app:installRelease",
        )
        parser.add_argument(
            "-a",
            "--launch-arg",
            action="append",
            help="extra argument appended to `am start`, may be repeated",
        )

    def run(self, args, conf):
        root = os.path.abspath(os.getcwd())
        need_project = args.install and not args.install_task.strip()
        detected = resolve_android_inputs(args, root, need_project)
        component = resolve_component(args, args.activity)
        deadline = make_deadline(args, conf)

        if args.install:
            task = args.install_task.strip()
            if not task and detected is not None:
                task = android.default_install_task(detected.module_dir)
            if not task:
                raise RequiredInputError(
                    "unable to determine Gradle install task; provide --install-task"
                )
            android.install_release(
                args.gradle or conf.gradle_path or "./gradlew", task, root, deadline
            )

        benchmark = android.AndroidBenchmark(
            android_config(args, conf, component), deadline
        )
        metrics = benchmark.run()
        result = Result(component=component, android=metrics, cli_command=args.cli_command)
        publish(result, args, conf, "android")
