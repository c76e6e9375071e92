#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from designbench.lib.errors import MetricNotFoundError
from designbench.lib.parser import Parser


class GetpropParser(Parser):
    """Single property value printed by `getprop <key>`."""

    def parse(self, stdout, stderr, returncode):
        value = "\n".join(stdout).strip()
        if not value:
            raise MetricNotFoundError("property is empty")
        return {"value": value}


class WmSizeParser(Parser):
    """Display resolution from `wm size`.

    An override size set with `wm size WxH` wins over the physical size.
    """

    def parse(self, stdout, stderr, returncode):
        sizes = {}
        for line in stdout:
            if ":" not in line:
                continue
            key, value = [part.strip() for part in line.split(":", 1)]
            sizes[key.lower()] = value
        for key in ("override size", "physical size"):
            if sizes.get(key):
                return {"resolution": sizes[key]}
        raise MetricNotFoundError("display size not found in wm output")
