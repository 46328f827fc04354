################################################################################
# Copyright (c) 2026 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import io
import os

from docker.errors import DockerException
import fixtures
import mock
import requests

from dumptruck import coredump
from dumptruck.tests.base import BaseTestCase
from dumptruck.tests.test_data import COREDUMP_CONTENT
from dumptruck.tests.test_data import DOCKER_V1_CGROUP_MOCK
from dumptruck.tests.test_data import K8S_CONTAINER_INSPECT
from dumptruck.tests.test_data import MOCKED_CONTAINER_ID
from dumptruck.tests.test_data import MOCKED_TIMESTAMP

STANDARD_PATH = f"/coredumps/{MOCKED_TIMESTAMP}-host1-myapp.core"
K8S_PATH = f"/coredumps/{MOCKED_TIMESTAMP}-web-7-nginx.core"


class MockedHdfsClient(object):
    """Keeps what was written instead of sending it to a namenode."""

    def __init__(self, url, user=None, timeout=None):
        self.url = url
        self.user = user
        self.timeout = timeout
        self.dirs = []
        self.files = {}

    def status(self, hdfs_path):
        return {"type": "DIRECTORY"}

    def makedirs(self, hdfs_path, permission=None):
        self.dirs.append(hdfs_path)

    def write(self, hdfs_path, data=None, overwrite=False):
        self.files[hdfs_path] = data.read()


class TestCoredump(BaseTestCase):

    def setUp(self):
        """Run before each test method to initialize test environment."""
        super(TestCoredump, self).setUp()

        def mocked_insecure_client(url, user=None, timeout=None):
            self.hdfs_client = MockedHdfsClient(url, user, timeout)
            return self.hdfs_client

        self.useFixture(
            fixtures.MonkeyPatch('dumptruck.writers.InsecureClient', mocked_insecure_client))

        self.docker_client = mock.Mock()
        self.docker_client.api.inspect_container.return_value = K8S_CONTAINER_INSPECT
        self.useFixture(
            fixtures.MonkeyPatch('dumptruck.paths.docker.from_env',
                                 mock.Mock(return_value=self.docker_client)))

        self.stdin = io.BytesIO(COREDUMP_CONTENT)

    def fallback_file(self, storage_path):
        return os.path.join(self.fallback_root, storage_path.lstrip("/"))

    def test_standard_process_to_hdfs(self):
        """pid without docker cgroup, cmdline /usr/bin/myapp, hostname host1."""
        self.write_proc(cmdline=b"/usr/bin/myapp\0")
        storage_path = coredump.CoreDumpHandler(self.conf, self.fake_log, self.stdin)
        self.assertEqual(storage_path, STANDARD_PATH)
        self.assertEqual(self.hdfs_client.user, "root")
        self.assertEqual(self.hdfs_client.dirs, ["/coredumps"])
        self.assertEqual(self.hdfs_client.files, {STANDARD_PATH: COREDUMP_CONTENT})
        self.assertFalse(os.path.exists(self.fallback_file(STANDARD_PATH)))
        self.docker_client.api.inspect_container.assert_not_called()

    def test_kubernetes_container_to_hdfs(self):
        self.write_proc(cgroup=DOCKER_V1_CGROUP_MOCK)
        storage_path = coredump.CoreDumpHandler(self.conf, self.fake_log, self.stdin)
        self.assertEqual(storage_path, K8S_PATH)
        self.assertEqual(self.hdfs_client.files, {K8S_PATH: COREDUMP_CONTENT})
        self.docker_client.api.inspect_container.assert_called_once_with(MOCKED_CONTAINER_ID)

    def test_hdfs_unreachable_falls_back(self):
        """The dump lands byte for byte below the fallback root."""
        self.useFixture(
            fixtures.MonkeyPatch('dumptruck.writers.InsecureClient',
                                 mock.Mock(side_effect=requests.exceptions.ConnectionError())))
        self.write_proc()
        storage_path = coredump.CoreDumpHandler(self.conf, self.fake_log, self.stdin)
        self.assertEqual(storage_path, STANDARD_PATH)
        with io.open(self.fallback_file(STANDARD_PATH), "rb") as f:
            self.assertEqual(f.read(), COREDUMP_CONTENT)

    def test_no_hdfs_endpoint_falls_back(self):
        self.write_proc()
        conf = self.make_conf(hdfs="")
        self.assertEqual(coredump.CoreDumpHandler(conf, self.fake_log, self.stdin), STANDARD_PATH)
        self.assertTrue(os.path.exists(self.fallback_file(STANDARD_PATH)))

    def test_fallback_disabled(self):
        """No local file is created when the fallback is disabled."""
        self.useFixture(
            fixtures.MonkeyPatch('dumptruck.writers.InsecureClient',
                                 mock.Mock(side_effect=requests.exceptions.ConnectionError())))
        self.write_proc()
        conf = self.make_conf(no_fallback=True)
        self.assertIsNone(coredump.CoreDumpHandler(conf, self.fake_log, self.stdin))
        self.assertEqual(os.listdir(self.fallback_root), [])

    def test_fallback_fails_silently(self):
        self.useFixture(
            fixtures.MonkeyPatch('dumptruck.writers.InsecureClient',
                                 mock.Mock(side_effect=requests.exceptions.ConnectionError())))
        self.write_proc()
        conf = self.make_conf(fallback_path=os.path.join(self.fallback_root, "file"))
        with io.open(conf.fallback_path, "w") as f:
            f.write("")
        self.assertIsNone(coredump.CoreDumpHandler(conf, self.fake_log, self.stdin))
        self.assertIn("Failed to create core file", self.fake_log.logs['warning'][-1])

    def test_missing_cgroup_aborts(self):
        exc = self.assertRaises(SystemExit, coredump.CoreDumpHandler, self.conf,
                                self.fake_log, self.stdin)
        self.assertEqual(exc.code, -1)
        self.assertEqual(self.stdin.tell(), 0)

    def test_docker_failure_aborts(self):
        self.docker_client.api.inspect_container.side_effect = DockerException("engine down")
        self.write_proc(cgroup=DOCKER_V1_CGROUP_MOCK)
        exc = self.assertRaises(SystemExit, coredump.CoreDumpHandler, self.conf,
                                self.fake_log, self.stdin)
        self.assertEqual(exc.code, -1)
        self.assertIn("Failed to inspect container", self.fake_log.logs['warning'][-1])

    def test_docker_failure_container_fallback(self):
        """With container_fallback the standard path is used instead of aborting."""
        self.docker_client.api.inspect_container.side_effect = DockerException("engine down")
        self.write_proc(cgroup=DOCKER_V1_CGROUP_MOCK)
        conf = self.make_conf(container_fallback=True)
        self.assertEqual(coredump.CoreDumpHandler(conf, self.fake_log, self.stdin), STANDARD_PATH)
        self.assertEqual(self.hdfs_client.files, {STANDARD_PATH: COREDUMP_CONTENT})

    def test_unreadable_stdin(self):
        self.write_proc()
        stdin = mock.Mock()
        stdin.read.side_effect = IOError("broken pipe")
        self.assertIsNone(coredump.CoreDumpHandler(self.conf, self.fake_log, stdin))
        self.assertIn("Failed to read coredump", self.fake_log.logs['warning'][-1])
