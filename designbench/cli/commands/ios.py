#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import os

from designbench.lib import ios, project
from designbench.lib.errors import DesignbenchError, RequiredInputError
from designbench.lib.report import Result

from .command import DesignbenchCommand, make_deadline, publish, resolve_component

logger = logging.getLogger(__name__)


def add_ios_arguments(parser, device_flag="--device"):
    parser.add_argument("--bundle", default="", help="iOS bundle identifier")
    parser.add_argument(
        device_flag,
        dest="ios_device",
        default="",
        help="simulator UDID (defaults to the first booted simulator)",
    )
    parser.add_argument("--xcrun", default=None, help="path to the xcrun binary")


def resolve_ios_inputs(args, root):
    if args.bundle.strip():
        return
    try:
        detected = project.detect_ios_project(root)
    except DesignbenchError as e:
        raise RequiredInputError(
            f"unable to auto-detect iOS bundle id: {e} (set --bundle manually)"
        ) from e
    args.bundle = detected.bundle_id


def ios_config(args, conf, component):
    return ios.IOSConfig(
        bundle_id=args.bundle,
        component=component,
        device_id=args.ios_device,
        xcrun_path=args.xcrun or conf.xcrun_path or "xcrun",
        launch_args=tuple(getattr(args, "launch_arg", None) or ()),
        benchmark_component=args.view or "",
        component_env_var=conf.component_env_var or ios.COMPONENT_ENV_VAR,
    )


class IOSCommand(DesignbenchCommand):
    def populate_parser(self, subparsers):
        parser = subparsers.add_parser("ios", help="run iOS render benchmark")
        parser.set_defaults(command=self)
        add_ios_arguments(parser)
        parser.add_argument(
            "-a",
            "--launch-arg",
            action="append",
            help="extra argument forwarded to the app by `simctl launch`, may be repeated",
        )

    def run(self, args, conf):
        resolve_ios_inputs(args, os.path.abspath(os.getcwd()))
        component = resolve_component(args, args.bundle)
        deadline = make_deadline(args, conf)

        benchmark = ios.IOSBenchmark(ios_config(args, conf, component), deadline)
        metrics = benchmark.run()
        result = Result(component=component, ios=metrics, cli_command=args.cli_command)
        publish(result, args, conf, "ios")
