################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import errno
import io
import os
import posixpath
import shutil
import stat
import tempfile

from hdfs import InsecureClient
from hdfs.util import HdfsError
import requests

from .common.constants import COPY_BUFFER_SIZE
from .common.constants import FALLBACK_DIR_MODE
from .common.constants import FALLBACK_FILE_MODE
from .common.constants import REMOTE_DIR_PERMISSION
from .common.constants import SPOOL_MAX_SIZE


def spool_stream(source, max_size=SPOOL_MAX_SIZE):
    """Copy the coredump stream into a rewindable buffer.

    stdin can only be read once, both writers read from the returned
    buffer so the fallback gets every byte even if the remote write failed
    half way. Small dumps stay in memory, large ones spill to a temporary
    file.

    Parameters
    ----------
    source : binary file object
        Coredump stream, normally sys.stdin.buffer
    max_size : int
        Bytes kept in memory before spilling to disk

    Returns
    -------
    tempfile.SpooledTemporaryFile
        Buffer positioned at offset 0, to be closed by the caller
    """
    spool = tempfile.SpooledTemporaryFile(max_size=max_size)
    try:
        shutil.copyfileobj(source, spool, COPY_BUFFER_SIZE)
    except BaseException:
        spool.close()
        raise
    spool.seek(0)
    return spool


def _endpointUrl(endpoint):
    if "://" in endpoint:
        return endpoint
    return "http://%s" % endpoint


def _hdfsClient(conf):
    client = InsecureClient(_endpointUrl(conf.hdfs), user=conf.hdfs_user,
                            timeout=conf.hdfs_timeout)
    # the client is lazy, make sure the namenode answers before using it
    client.status("/")
    return client


def write_remote(storage_path, stream, conf, log):
    """Create storage_path on HDFS and copy the stream into it.

    Returns False if the client can't be built or the file can't be
    created, the caller falls back to the local path in both cases.
    """
    if not conf.hdfs:
        log.warning("No hdfs namenode configured, falling back to system")
        return False

    try:
        client = _hdfsClient(conf)
    except (HdfsError, requests.exceptions.RequestException) as e:
        log.warning("Error creating hdfs client, falling back to system: %s" % e)
        return False

    log.warning("Writing to hdfs: path=%s" % storage_path)
    try:
        client.makedirs(posixpath.dirname(storage_path),
                        permission=REMOTE_DIR_PERMISSION)
        stream.seek(0)
        client.write(storage_path, data=stream, overwrite=False)
    except (HdfsError, requests.exceptions.RequestException, IOError) as e:
        log.warning("Error creating file in hdfs, falling back to system: %s" % e)
        return False

    log.warning("Finished writing coredump to hdfs: path=%s" % storage_path)
    return True


def _checkDirectory(path):
    # a pre-existing directory in a shared root must be ours and not a link
    st = os.lstat(path)
    if stat.S_ISLNK(st.st_mode) or st.st_uid != os.geteuid():
        raise IOError(errno.EPERM, "Not a directory owned by this user", path)
    if stat.S_IMODE(st.st_mode) & ~FALLBACK_DIR_MODE:
        os.chmod(path, FALLBACK_DIR_MODE)


def write_fallback(storage_path, stream, conf, log):
    """Write the stream below the local fallback root.

    The core file is created exclusively and never through a symlink, an
    existing file is left untouched. Failures are logged and absorbed,
    there is nothing left to fall back to.
    """
    core_file = os.path.join(conf.fallback_path, storage_path.lstrip("/"))
    log.warning("Writing to system: path=%s" % core_file)
    try:
        core_dir = os.path.dirname(core_file)
        os.makedirs(core_dir, mode=FALLBACK_DIR_MODE, exist_ok=True)
        _checkDirectory(core_dir)
        stream.seek(0)
        fd = os.open(core_file,
                     os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_NOFOLLOW,
                     FALLBACK_FILE_MODE)
        with io.open(fd, "wb") as f:
            shutil.copyfileobj(stream, f, COPY_BUFFER_SIZE)
            f.flush()
    except IOError as e:
        log.warning("Failed to create core file %s: %s" % (core_file, e))
        return False

    log.warning("Finished writing coredump file %s" % core_file)
    return True
