################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import sys

from . import config
from . import coredump
from . import log as dumptruck_log


def main(argv=None):
    # https://man7.org/linux/man-pages/man5/core.5.html
    # core_pattern: |/usr/bin/dumptruck --pid=%P --hdfs=<namenode>
    conf = config.parse_config(argv)
    log = dumptruck_log.setup_logging(conf)
    coredump.CoreDumpHandler(conf, log, sys.stdin.buffer)


if __name__ == "__main__":
    main()
