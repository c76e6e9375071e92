#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import errno
import logging
import math
import os
import re
import subprocess
import sys
import time
import typing
from datetime import datetime, timezone

from designbench.lib.errors import (
    ConfigError,
    ReportError,
    ToolInvocationError,
    ToolTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_REPORTS_DIR = "designbench-reports"

# Number of output lines kept in error messages
TRIM_OUTPUT_LINES = 20

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)


class ToolResult(typing.NamedTuple):
    cmd: typing.List[str]
    output: str
    returncode: int

    def lines(self) -> typing.List[str]:
        return self.output.splitlines()


class Deadline:
    """Single wall-clock budget shared by every process a command spawns.

    A slow probe early in a run eats into the time left for later probes;
    there is no per-probe budget.
    """

    def __init__(self, seconds: typing.Optional[float] = None) -> None:
        self.seconds = seconds
        if seconds is None or seconds <= 0:
            self.seconds = None
            self._expires_at = None
        else:
            self._expires_at = time.monotonic() + seconds

    def remaining(self) -> typing.Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def __repr__(self) -> str:
        return f"<Deadline seconds={self.seconds} remaining={self.remaining()}>"


def _trim(output: str) -> str:
    lines = output.strip().splitlines()
    if len(lines) > TRIM_OUTPUT_LINES:
        lines = [f"[...trimmed to last {TRIM_OUTPUT_LINES} lines...]"] + lines[
            -TRIM_OUTPUT_LINES:
        ]
    return "\n".join(lines)


def run_tool(
    binary: str,
    args: typing.Sequence[str],
    device_args: typing.Optional[typing.Sequence[str]] = None,
    env: typing.Optional[typing.Mapping[str, str]] = None,
    deadline: typing.Optional[Deadline] = None,
) -> ToolResult:
    """Run an external tool to completion and capture its combined output.

    Args:
        binary (str): tool path, e.g. "adb" or "/usr/bin/xcrun"
        args (list of str): tool arguments
        device_args (list of str): device selector placed before args,
            e.g. ["-s", "emulator-5554"]
        env (dict): extra environment variables merged over os.environ
        deadline (Deadline): command-wide deadline

    Returns:
        (ToolResult): command line, decoded stdout+stderr and return code

    Raises:
        ToolInvocationError: the tool could not start or exited non-zero
        ToolTimeoutError: the deadline expired; the child has been killed
    """
    cmd = [binary] + list(device_args or []) + list(args)
    cmd_str = " ".join(cmd)
    timeout = deadline.remaining() if deadline is not None else None
    if timeout is not None and timeout <= 0:
        raise ToolTimeoutError(
            f"deadline exceeded before running '{cmd_str}'", cmd, deadline.seconds
        )

    proc_env = None
    if env:
        proc_env = dict(os.environ)
        proc_env.update(env)

    logger.debug("Running '%s' (timeout=%s)", cmd_str, timeout)
    try:
        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=proc_env,
        )
    except OSError as e:
        msg = f"could not run '{cmd_str}': {e.strerror or e}"
        if e.errno == errno.ENOENT:
            msg += f" (is {binary} installed and on PATH?)"
        raise ToolInvocationError(msg, cmd, errno=e.errno) from e

    try:
        stdout, _ = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate()
        raise ToolTimeoutError(
            f"'{cmd_str}' timed out (command deadline {deadline.seconds}s)",
            cmd,
            deadline.seconds,
        ) from None

    output = stdout.decode("utf-8", "ignore")
    logger.debug("fd=stdout cmd=%s output=%s", cmd_str, output)
    if process.returncode != 0:
        raise ToolInvocationError(
            f"'{cmd_str}' returned non-zero exit status {process.returncode}: "
            f"{_trim(output)}",
            cmd,
            returncode=process.returncode,
            output=output,
        )
    return ToolResult(cmd, output, process.returncode)


def parse_duration(value) -> typing.Optional[float]:
    """Convert "60s", "2m", "1m30s", "500ms" or a bare number of seconds
    to seconds. Empty or zero means no deadline and returns None.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip().lower()
        if text == "":
            return None
        try:
            seconds = float(text)
        except ValueError:
            pos = 0
            seconds = 0.0
            for match in _DURATION_PART_RE.finditer(text):
                if match.start() != pos:
                    break
                seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
                pos = match.end()
            if pos != len(text):
                raise ConfigError(f'invalid timeout "{value}"') from None
    if seconds < 0 or not math.isfinite(seconds):
        raise ConfigError(f'invalid timeout "{value}"')
    if seconds == 0:
        return None
    return seconds


def sanitize_token(value: str, fallback: str) -> str:
    token = re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower()).strip("-")
    return token or fallback


def default_report_filename(component: str, platform: str) -> str:
    component_token = sanitize_token(component, "component")
    platform_token = sanitize_token(platform, "run")
    return f"{component_token}-{platform_token}.json"


def resolve_output_file(
    component: str,
    platform: str,
    output: typing.Optional[str] = None,
    reports_dir: str = DEFAULT_REPORTS_DIR,
) -> str:
    """Pick the report path and create its parent directory.

    No output: <reports_dir>/<component>-<platform>.json. A relative output
    is placed under reports_dir and an absolute one is used unchanged.
    """
    path = (output or "").strip()
    if not path:
        path = os.path.join(reports_dir, default_report_filename(component, platform))
    elif not os.path.isabs(path):
        path = os.path.join(reports_dir, path)
    directory = os.path.dirname(path)
    if directory:
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        except OSError as e:
            raise ReportError(
                f"could not create report directory {directory}: {e}"
            ) from e
    return path


def current_cli_command(argv: typing.Sequence[str], prog: str = "designbench") -> str:
    return " ".join([prog] + list(argv))


def generate_timestamp() -> datetime:
    return datetime.now(timezone.utc)
