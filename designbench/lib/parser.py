#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import re
from abc import ABCMeta, abstractmethod

_NUMBER_RE = re.compile(r"^[-+]?\d+(?:\.\d+)?$")


def to_float(value):
    """Return value as a float, or None if it is not a plain decimal number."""
    value = value.strip()
    if not _NUMBER_RE.match(value):
        return None
    return float(value)


class Parser(object, metaclass=ABCMeta):
    """Parser is the link between diagnostic tool output and the metrics
    record. A Parser is given the tool's output and returns the exported
    metrics. Parsers hold no state between calls beyond what they were
    constructed with.
    """

    @abstractmethod
    def parse(self, stdout, stderr, returncode):
        """Take stdout/stderr and convert it to a dictionary of metrics.

        Args:
            stdout (list of str): tool output split on newline
            stderr (list of str): tool stderr split on newline, empty when
                it was merged into stdout
            returncode (int): subprocess return code

        Returns:
            (dict): metrics mapping name -> value

        Raises:
            MetricNotFoundError: the expected line or field is absent
        """
        pass
