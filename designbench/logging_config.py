# Copyright (c) Meta Platforms, Inc. and affiliates.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging
import logging.handlers
import os

LOG_FILE = "designbench.log"


class ConditionalFormatter(logging.Formatter):
    def format(self, record):
        if hasattr(record, "raw") and record.raw:
            return record.getMessage()
        else:
            return logging.Formatter.format(self, record)


formatter = ConditionalFormatter(
    "[%(asctime)s] %(name)-12s %(levelname)-8s: %(message)s"
)

stream_handler = logging.StreamHandler()
stream_handler.setLevel(logging.WARNING)

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def create_logger(verbose=0, log_file=LOG_FILE):
    root = logging.getLogger()
    root.setLevel(os.environ.get("LOGLEVEL", "INFO"))
    if log_file and not any(
        isinstance(h, logging.handlers.WatchedFileHandler) for h in root.handlers
    ):
        handler = logging.handlers.WatchedFileHandler(log_file)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    stream_handler.setLevel(VERBOSITY_LEVELS.get(verbose, logging.DEBUG))
    if verbose > 1:
        root.setLevel(logging.DEBUG)
    root.addHandler(stream_handler)
    return root
