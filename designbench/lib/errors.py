#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Exceptions raised while collecting and reporting benchmark metrics.

Required inputs and the primary launch are fatal: their errors propagate to
``main()`` which prints them and exits non-zero. Memory and CPU probes are
optional and go through ``best_effort`` which turns a failed tool or a
missing field into ``None``. A deadline expiry is never absorbed.
"""

import logging

logger = logging.getLogger(__name__)


class DesignbenchError(Exception):
    """Base class of every error designbench reports to the user."""


class ConfigError(DesignbenchError):
    """Invalid configuration file or flag value."""


class RequiredInputError(DesignbenchError):
    """A package, activity or bundle id is missing and could not be detected."""


class ToolError(DesignbenchError):
    """An external tool (adb, xcrun, gradle) did not produce usable output."""

    def __init__(self, message, cmd=None):
        super().__init__(message)
        self.cmd = cmd or []


class ToolInvocationError(ToolError):
    """The tool could not be started or exited with a non-zero status."""

    def __init__(self, message, cmd=None, returncode=None, output="", errno=None):
        super().__init__(message, cmd)
        self.returncode = returncode
        self.output = output
        self.errno = errno


class ToolTimeoutError(ToolError):
    """The command deadline expired while the tool was running."""

    def __init__(self, message, cmd=None, timeout=None):
        super().__init__(message, cmd)
        self.timeout = timeout


class ReportError(DesignbenchError):
    """The report file or its directory could not be written."""


class ParseError(DesignbenchError):
    """Tool output could not be decoded."""


class MetricNotFoundError(ParseError):
    """Tool output was read but the expected marker or field was absent."""


def best_effort(probe, *args, **kwargs):
    """Run an optional probe and return its value, or None if it failed.

    Only invocation and parse failures are absorbed. ToolTimeoutError
    propagates so that an expired deadline aborts the whole run.
    """
    try:
        return probe(*args, **kwargs)
    except (ToolInvocationError, ParseError) as e:
        logger.debug("%s skipped: %s", getattr(probe, "__name__", probe), e)
        return None
