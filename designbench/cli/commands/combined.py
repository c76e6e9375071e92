#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import os

from designbench.lib import android, ios
from designbench.lib.report import Result

from .android import add_android_arguments, android_config, resolve_android_inputs
from .command import DesignbenchCommand, make_deadline, publish, resolve_component
from .ios import add_ios_arguments, ios_config, resolve_ios_inputs

logger = logging.getLogger(__name__)


class AllCommand(DesignbenchCommand):
    """Android then iOS, one after the other, under a single deadline."""

    def populate_parser(self, subparsers):
        parser = subparsers.add_parser(
            "all", help="run the Android and iOS benchmarks into one report"
        )
        parser.set_defaults(command=self, launch_arg=None)
        add_android_arguments(parser, device_flag="--android-device")
        add_ios_arguments(parser, device_flag="--ios-device")

    def run(self, args, conf):
        root = os.path.abspath(os.getcwd())
        resolve_android_inputs(args, root)
        resolve_ios_inputs(args, root)
        component = resolve_component(args, args.activity or args.bundle)
        deadline = make_deadline(args, conf)

        logger.info('Running Android and iOS benchmarks for "%s"', component)
        android_metrics = android.AndroidBenchmark(
            android_config(args, conf, component), deadline
        ).run()
        ios_metrics = ios.IOSBenchmark(ios_config(args, conf, component), deadline).run()
        result = Result(
            component=component,
            android=android_metrics,
            ios=ios_metrics,
            cli_command=args.cli_command,
        )
        publish(result, args, conf, "all")
