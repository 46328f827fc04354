################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import collections
import datetime
import io
import os
import posixpath
import socket

import docker

from .common.constants import CORE_FILE_FORMAT
from .common.constants import K8S_CONTAINER_NAME_LABEL
from .common.constants import K8S_POD_NAME_LABEL
from .common.constants import PROC_ROOT
from .common.constants import TIMESTAMP_FORMAT

ProcessIdentity = collections.namedtuple('ProcessIdentity', 'timestamp host process')


def _timestamp():
    return datetime.datetime.now(datetime.timezone.utc).strftime(TIMESTAMP_FORMAT)


def _hostname():
    try:
        return socket.gethostname()
    except OSError:
        return ""


def _exeName(pid, proc_root=PROC_ROOT):
    cmdline = os.path.join(proc_root, str(pid), "cmdline")
    with io.open(cmdline, "rb") as f:
        argv0 = f.read().split(b"\0")[0]
    return os.path.basename(os.fsdecode(argv0))


def format_path(prefix, identity):
    """Join the identity into <prefix>/<timestamp>-<host>-<process>.core"""
    return posixpath.join(prefix, CORE_FILE_FORMAT % identity)


def standard_identity(pid, log, proc_root=PROC_ROOT):
    """Identify a process running directly on the host.

    Parameters
    ----------
    pid : int
        Host PID of the dumping process
    log : logging.Logger
        Logger of the current run
    proc_root : str
        Mount point of the process information filesystem

    Returns
    -------
    ProcessIdentity
        Hostname and executable base name, or pid-<pid> if the command line
        can't be read
    """
    try:
        process = _exeName(pid, proc_root)
    except IOError as e:
        log.warning("Failed to read process cmdline: %s" % e)
        process = ""
    if not process:
        process = "pid-%s" % pid
    return ProcessIdentity(_timestamp(), _hostname(), process)


def inspect_container(container_id):
    """Ask the docker engine for the container metadata.

    Raises docker.errors.DockerException (or a requests exception) when the
    engine can't be reached or doesn't know the container.
    """
    client = docker.from_env()
    try:
        return client.api.inspect_container(container_id)
    finally:
        client.close()


def container_identity(container_id, log):
    """Identify a containerized process.

    Kubernetes containers are named after the pod and container labels the
    kubelet sets, other containers after the host and the container name.
    """
    container = inspect_container(container_id)
    labels = (container.get('Config') or {}).get('Labels') or {}
    timestamp = _timestamp()

    # the engine reports names with a leading slash
    name = container.get('Name', "").lstrip("/")

    if K8S_POD_NAME_LABEL in labels:
        log.debug("Container %s belongs to pod %s" %
                  (container_id, labels[K8S_POD_NAME_LABEL]))
        return ProcessIdentity(timestamp, labels[K8S_POD_NAME_LABEL],
                               labels.get(K8S_CONTAINER_NAME_LABEL) or name)

    return ProcessIdentity(timestamp, _hostname(), name)


def build_standard_path(pid, prefix, log, proc_root=PROC_ROOT):
    return format_path(prefix, standard_identity(pid, log, proc_root))


def build_container_path(container_id, prefix, log):
    return format_path(prefix, container_identity(container_id, log))
