################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import sys

from docker.errors import DockerException
import requests

from .cgroup import get_container_id
from .paths import build_container_path
from .paths import build_standard_path
from .writers import spool_stream
from .writers import write_fallback
from .writers import write_remote


def _storagePath(conf, log):
    container_id = get_container_id(conf.pid, log, conf.cgroup_classifier,
                                    conf.proc_root)
    if not container_id:
        return build_standard_path(conf.pid, conf.prefix, log, conf.proc_root)

    try:
        return build_container_path(container_id, conf.prefix, log)
    except (DockerException, requests.exceptions.RequestException) as e:
        if not conf.container_fallback:
            log.warning("Failed to inspect container %s: %s" % (container_id, e))
            sys.exit(-1)
        log.warning("Failed to inspect container %s, using the standard path: %s"
                    % (container_id, e))
        return build_standard_path(conf.pid, conf.prefix, log, conf.proc_root)


def CoreDumpHandler(conf, log, stdin=None):
    """Store the coredump read from stdin for the process conf.pid.

    Returns the storage path once the dump landed on HDFS or below the
    fallback root, None if every write attempt failed.
    """
    log.warning("Receiving coredump from pid=%s" % conf.pid)

    storage_path = _storagePath(conf, log)
    log.warning("Storage path for pid=%s: %s" % (conf.pid, storage_path))

    if stdin is None:
        stdin = sys.stdin.buffer
    try:
        spool = spool_stream(stdin)
    except IOError as e:
        log.warning("Failed to read coredump from stdin: %s" % e)
        return None

    with spool:
        if write_remote(storage_path, spool, conf, log):
            return storage_path

        if conf.no_fallback:
            log.warning("Fallback disabled, dropping coredump of pid=%s" % conf.pid)
            return None

        if write_fallback(storage_path, spool, conf, log):
            return storage_path
    return None
