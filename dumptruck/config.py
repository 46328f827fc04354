################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################

""" Define configuration info for dumptruck"""

import collections

from oslo_config import cfg

from .cgroup import CLASSIFIERS
from .common import constants

InvocationConfig = collections.namedtuple(
    'InvocationConfig',
    'pid hdfs fallback_path prefix no_fallback hdfs_user hdfs_timeout '
    'container_fallback cgroup_classifier proc_root log_level syslog_address')

cli_opts = [
    cfg.IntOpt("pid",
               default=0,
               help="Host PID of the dumping process (%P in core_pattern)"),
    cfg.StrOpt("hdfs",
               default="",
               help="HDFS namenode WebHDFS endpoint, e.g. namenode:9870"),
    cfg.StrOpt("fallback-path",
               default=constants.DEFAULT_FALLBACK_PATH,
               help="Local root used when writing to HDFS fails"),
    cfg.StrOpt("prefix",
               default=constants.DEFAULT_PREFIX,
               help="Directory prefix of the stored coredump"),
    cfg.BoolOpt("no-fallback",
                default=False,
                help="Don't fall back to the local path when HDFS fails"),
    cfg.StrOpt("hdfs-user",
               default=constants.DEFAULT_HDFS_USER,
               help="User the HDFS files are created as"),
    cfg.FloatOpt("hdfs-timeout",
                 default=constants.DEFAULT_HDFS_TIMEOUT,
                 min=0,
                 help="Seconds before an HDFS request is abandoned, 0 waits "
                      "forever"),
    cfg.BoolOpt("container-fallback",
                default=False,
                help="Use the standard path when the docker engine can't "
                     "be queried instead of aborting"),
    cfg.StrOpt("cgroup-classifier",
               default="docker",
               choices=sorted(CLASSIFIERS),
               help="Rule used to find a container ID in the cgroup file"),
    cfg.StrOpt("proc-root",
               default=constants.PROC_ROOT,
               help="Mount point of the process information filesystem"),
    cfg.StrOpt("log-level",
               default="WARNING",
               choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
               help="Set the log level"),
    cfg.StrOpt("syslog-address",
               default=constants.SYSLOG_ADDRESS,
               help="Syslog socket, stderr is used if it doesn't exist"),
]


def parse_config(argv=None, default_config_files=None):
    """Parse the invocation flags (and config files) into an InvocationConfig.

    Parameters
    ----------
    argv : list
        Command line arguments without the program name, sys.argv[1:] if None
    default_config_files : list
        Config files read when --config-file isn't given, oslo.config looks
        for dumptruck.conf in the usual locations if None

    Returns
    -------
    InvocationConfig
        Immutable set of resolved options
    """
    conf = cfg.ConfigOpts()
    conf.register_cli_opts(cli_opts)
    conf(args=argv, project=constants.PROJECT,
         default_config_files=default_config_files)

    timeout = conf.hdfs_timeout if conf.hdfs_timeout else None
    return InvocationConfig(
        pid=conf.pid,
        hdfs=conf.hdfs,
        fallback_path=conf.fallback_path,
        prefix=conf.prefix,
        no_fallback=conf.no_fallback,
        hdfs_user=conf.hdfs_user,
        hdfs_timeout=timeout,
        container_fallback=conf.container_fallback,
        cgroup_classifier=conf.cgroup_classifier,
        proc_root=conf.proc_root,
        log_level=conf.log_level,
        syslog_address=conf.syslog_address)
