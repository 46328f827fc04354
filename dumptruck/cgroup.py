################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import io
import os
import re
import sys

from .common.constants import PROC_ROOT

# v1: "12:memory:/docker/<id>", v2 cgroupfs driver: "0::/docker/<id>"
DOCKER_PATTERN = re.compile(r".*docker/([^/\s]+)")
# systemd cgroup driver: "0::/system.slice/docker-<id>.scope"
SYSTEMD_SCOPE_PATTERN = re.compile(r".*docker-([0-9a-f]+)\.scope")


def read_cgroups(pid, proc_root=PROC_ROOT):
    cgroups = os.path.join(proc_root, str(pid), "cgroup")
    with io.open(cgroups, "r") as f:
        return f.read()


def classify_docker(cgroups):
    """Return the container ID found after "docker/" or None.

    The first matching line wins, inside that line the last "docker/"
    segment is used.
    """
    for line in cgroups.splitlines():
        match = DOCKER_PATTERN.match(line)
        if match:
            return match.group(1)
    return None


def classify_systemd(cgroups):
    """Like classify_docker, also accepting systemd "docker-<id>.scope" units."""
    for line in cgroups.splitlines():
        match = SYSTEMD_SCOPE_PATTERN.match(line)
        if match:
            return match.group(1)
    return classify_docker(cgroups)


CLASSIFIERS = {
    'docker': classify_docker,
    'systemd': classify_systemd,
}


def get_container_id(pid, log, classifier='docker', proc_root=PROC_ROOT):
    try:
        cgroups = read_cgroups(pid, proc_root)
    except IOError as e:
        log.warning("Failed to read process cgroups: %s" % e)
        sys.exit(-1)

    container_id = CLASSIFIERS[classifier](cgroups)
    log.debug("getContainerID: pid=%s container_id=%s" % (pid, container_id))
    return container_id  # None is normal for processes not in a container
