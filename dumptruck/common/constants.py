################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################

PROJECT = "dumptruck"

PROC_ROOT = "/proc"
DEFAULT_FALLBACK_PATH = "/tmp/"
DEFAULT_PREFIX = "/coredumps/"
DEFAULT_HDFS_USER = "root"
DEFAULT_HDFS_TIMEOUT = 60.0
SYSLOG_ADDRESS = "/dev/log"

# Format is timestamp-hostIdentifier-processIdentifier
CORE_FILE_FORMAT = "%s-%s-%s.core"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

K8S_POD_NAME_LABEL = "io.kubernetes.pod.name"
K8S_CONTAINER_NAME_LABEL = "io.kubernetes.container.name"

REMOTE_DIR_PERMISSION = "755"
FALLBACK_DIR_MODE = 0o700
FALLBACK_FILE_MODE = 0o600

# stdin is kept in memory up to this size before spilling to disk
SPOOL_MAX_SIZE = 64 * 1024 * 1024
COPY_BUFFER_SIZE = 1024 * 1024
