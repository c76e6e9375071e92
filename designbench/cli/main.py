#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import argparse
import logging
import sys

from designbench import config, logging_config, PROJECT, VERSION
from designbench.lib.errors import DesignbenchError
from designbench.lib.reporter import JSONFileReporter, StdoutReporter, SummaryReporter
from designbench.lib.reporter_factory import ReporterFactory
from designbench.lib.util import current_cli_command, eprint

from .commands.android import AndroidCommand
from .commands.combined import AllCommand
from .commands.ios import IOSCommand
from .commands.preflight import PreflightCommand

logger = logging.getLogger(__name__)


def setup_parser():
    """Setup the commands and command line parser.

    Returns:
        setup parser (argparse.ArgumentParser)
    """
    commands = [
        AndroidCommand(),
        IOSCommand(),
        AllCommand(),
        PreflightCommand(),
    ]

    parser = argparse.ArgumentParser(
        prog=PROJECT,
        description="DesignBench benchmarks UI render performance across Android and iOS.",
    )
    parser.add_argument(
        "--component", default="", help="component name label for the benchmark run"
    )
    parser.add_argument(
        "--view",
        default="",
        help="UI view identifier forwarded to benchmark harnesses on each platform",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="",
        help="write JSON report to this path "
        "(defaults to ./designbench-reports/<component>-<platform>.json)",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        help="overall command timeout, e.g. 45s, 2m (default from config: 60s)",
    )
    parser.add_argument(
        "--reports-dir",
        default=None,
        help="directory for JSON reports (default from config)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="optional YAML file overriding the default settings",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print the JSON report instead of the text summary",
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="subcommand to run")
    for command in commands:
        command.populate_parser(subparsers)

    subparsers.required = True

    parser.add_argument("--verbose", "-v", action="count", default=0)
    parser.add_argument("--version", action="version", version=f"{PROJECT} {VERSION}")

    return parser


def register_reporters():
    ReporterFactory.register("summary", SummaryReporter)
    ReporterFactory.register("json", StdoutReporter)
    ReporterFactory.register("json_file", JSONFileReporter)


# ignore sys.argv[0] because that is the name of the program
def main(args=None):
    if args is None:
        args = sys.argv[1:]
    register_reporters()

    parser = setup_parser()
    parsed = parser.parse_args(args)
    parsed.cli_command = current_cli_command(args, PROJECT)

    logging_config.create_logger(parsed.verbose)

    try:
        conf = config.load_config(parsed.config)
        parsed.command.run(parsed, conf)
    except DesignbenchError as e:
        # stderr gets the message once; the log file keeps the context
        logger.info("%s failed: %s", parsed.subcommand, e)
        eprint(f"{PROJECT}: {e}")
        sys.exit(1)
