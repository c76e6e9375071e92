#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Loading and validating designbench settings.

Defaults ship as ``defaults.yml`` inside this package. A user file passed
with ``--config`` is overlaid on top of them.

Typical usage example:

    from designbench import config

    conf = config.DesignbenchConfig()
    with config.DEFAULTS_CONFIG_PATH.open() as defaults:
        conf.load(defaults)
    conf.adb_path

"""

import importlib.resources
import logging
from typing import IO, Union

import yaml
from designbench.lib.errors import ConfigError

DEFAULTS_CONFIG_PATH = importlib.resources.files("designbench.config") / "defaults.yml"

logger = logging.getLogger(__name__)


class DesignbenchConfig:
    KEYS = (
        "adb_path",
        "xcrun_path",
        "gradle_path",
        "timeout",
        "reports_dir",
        "component_extra_key",
        "component_env_var",
    )

    def __init__(self):
        self.settings = {}

    def load(self, stream: Union[bytes, IO[bytes], str, IO[str]], source="<defaults>"):
        """Overlay the YAML mapping read from stream on the current settings."""
        try:
            data = yaml.safe_load(stream)
        except yaml.YAMLError as e:
            raise ConfigError(f"could not parse config {source}: {e}") from e
        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError(f"config {source} must be a mapping")
        unknown = sorted(set(data) - set(self.KEYS))
        if unknown:
            raise ConfigError(
                "unknown config key(s) in {}: {}".format(source, ", ".join(unknown))
            )
        self.settings.update(data)

    def __getattr__(self, name):
        if name in DesignbenchConfig.KEYS:
            value = self.settings.get(name)
            return "" if value is None else str(value)
        raise AttributeError(name)

    def __repr__(self) -> str:
        return f"<DesignbenchConfig {self.settings}>"


def load_config(path=None) -> DesignbenchConfig:
    conf = DesignbenchConfig()
    with DEFAULTS_CONFIG_PATH.open("r") as defaults:
        conf.load(defaults)
    if path:
        logger.info('Loading config overrides from "%s"', path)
        try:
            with open(path, "r") as overrides:
                conf.load(overrides, source=path)
        except OSError as e:
            raise ConfigError(f"could not read config {path}: {e}") from e
    return conf
