#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

# pyre-unsafe

import logging
import os

import click
import tabulate
from designbench.lib import preflight

from .command import DesignbenchCommand, make_deadline, TABLE_FORMAT

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    preflight.Status.PASS: "green",
    preflight.Status.WARN: "yellow",
    preflight.Status.FAIL: "red",
}


def format_checklist(items):
    table = []
    for item in items:
        status = click.style(
            "[{}]".format(item.status.value), fg=STATUS_COLORS[item.status]
        )
        notes = list(item.notes) or [""]
        table.append([status, item.name, notes[0]])
        for note in notes[1:]:
            table.append(["", "", note])
    return tabulate.tabulate(table, tablefmt=TABLE_FORMAT)


class PreflightCommand(DesignbenchCommand):
    def populate_parser(self, subparsers):
        parser = subparsers.add_parser(
            "preflight",
            help="run a readiness checklist for Android and iOS benchmarking",
        )
        parser.set_defaults(command=self)
        parser.add_argument(
            "--root", default=".", help="project root to scan for manifests"
        )
        parser.add_argument("--adb", default=None, help="path to the adb binary")
        parser.add_argument("--xcrun", default=None, help="path to the xcrun binary")

    def run(self, args, conf):
        root = os.path.abspath(args.root or ".")
        deadline = make_deadline(args, conf)
        items = preflight.run_checklist(
            root,
            adb_path=args.adb or conf.adb_path or "adb",
            xcrun_path=args.xcrun or conf.xcrun_path or "xcrun",
            deadline=deadline,
        )
        click.echo("Preflight checklist (root: {})\n".format(root))
        click.echo(format_checklist(items))
        failed = [item.name for item in items if item.status == preflight.Status.FAIL]
        if failed:
            logger.info("Preflight failures: %s", ", ".join(failed))
