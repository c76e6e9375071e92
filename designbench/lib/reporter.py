#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import os
from abc import ABCMeta, abstractmethod

import click
from designbench.lib import report
from designbench.lib.errors import ReportError

logger = logging.getLogger(__name__)


class Reporter(metaclass=ABCMeta):
    """A Reporter is used to publish a benchmark Result."""

    @abstractmethod
    def report(self, result):
        """Publish the result of one designbench invocation.

        Args:
            result (report.Result): metrics of every platform that ran
        """
        pass

    @abstractmethod
    def close(self):
        """Do whatever necessary cleanup is required after reporting."""
        pass


class SummaryReporter(Reporter):
    """Default reporter implementation, prints the short text summary."""

    def report(self, result):
        click.echo(report.format_summary(result), nl=False)

    def close(self):
        pass


class StdoutReporter(Reporter):
    """Prints the full JSON report to stdout."""

    def report(self, result):
        click.echo(report.to_json(result), nl=False)

    def close(self):
        pass


class JSONFileReporter(Reporter):
    """Writes the JSON report to a file, creating its directory if needed."""

    def __init__(self, path):
        self.path = path

    def report(self, result):
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, mode=0o755, exist_ok=True)
            with open(self.path, "w") as json_fp:
                json_fp.write(report.to_json(result))
        except OSError as e:
            raise ReportError(f"could not write report {self.path}: {e}") from e
        logger.info('Wrote report to "%s"', self.path)

    def close(self):
        pass
