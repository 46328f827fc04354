################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################

""" Define the logger handed to every dumptruck component"""

import logging
from logging import handlers
import os
import sys

from .common.constants import PROJECT


def setup_logging(conf):
    """Build the dumptruck logger.

    Messages go to syslog (user facility) when the syslog socket exists,
    otherwise to stderr. Stdout is never used, the kernel doesn't read it.
    """
    log = logging.getLogger(PROJECT)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    if os.path.exists(conf.syslog_address):
        handler = handlers.SysLogHandler(
            address=conf.syslog_address,
            facility=handlers.SysLogHandler.LOG_USER)
        formatter = logging.Formatter(
            "%(name)s[%(process)d]: %(module)s.%(lineno)d - %(levelname)s "
            "%(message)s")
    else:
        handler = logging.StreamHandler(stream=sys.stderr)
        formatter = logging.Formatter(
            "%(asctime)s %(name)s[%(process)d] %(module)s.%(lineno)d - "
            "%(levelname)s %(message)s",
            datefmt='%FT%T')
    handler.setFormatter(formatter)
    log.addHandler(handler)
    log.setLevel(conf.log_level)
    log.propagate = False
    return log
