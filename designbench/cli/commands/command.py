#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
from abc import ABCMeta, abstractmethod

from designbench.lib import util
from designbench.lib.reporter_factory import ReporterFactory

# Defines how the table is styled
TABLE_FORMAT = "plain"

logger = logging.getLogger(__name__)


class DesignbenchCommand(object, metaclass=ABCMeta):
    @abstractmethod
    def populate_parser(self, parser):
        pass

    @abstractmethod
    def run(self, args, conf):
        pass


def resolve_component(args, fallback=""):
    """Label for the run: --component, then --view, then fallback."""
    return args.component or args.view or fallback or "component"


def make_deadline(args, conf):
    timeout = args.timeout if args.timeout is not None else conf.timeout
    return util.Deadline(util.parse_duration(timeout))


def publish(result, args, conf, platform):
    """Print the result and write the JSON report file."""
    reporter = ReporterFactory.create("json" if args.json else "summary")
    reporter.report(result)
    reporter.close()

    path = util.resolve_output_file(
        result.component,
        platform,
        args.output,
        args.reports_dir or conf.reports_dir or util.DEFAULT_REPORTS_DIR,
    )
    file_reporter = ReporterFactory.create("json_file", path)
    file_reporter.report(result)
    file_reporter.close()
    return path
