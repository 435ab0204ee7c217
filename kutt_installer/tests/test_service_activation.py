# Path and File Name : /home/kutt/kutt-installer/kutt_installer/tests/test_service_activation.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests for systemd unit generation and container/native service activation

import os
import shutil
import stat
import sys
import tempfile
import unittest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from kutt_installer.errors import ProvisioningError
from kutt_installer.models import DbBackend, DeployMode, InstallConfig
from kutt_installer.runtime import ServiceActivator
from kutt_installer.services import SystemdWriter
from kutt_installer.tests.fakes import FakeAccounts, FakeDocker, FakeNode, FakeSupervisor, make_host, make_profile


class TestSystemdWriter(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.profile = make_profile(Path(self.test_dir))
        self.supervisor = FakeSupervisor()
        self.writer = SystemdWriter(self.profile, self.supervisor)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_container_unit(self):
        content = self.writer.render_container_unit("docker-compose.postgres.yml")
        self.assertIn("Type=oneshot", content)
        self.assertIn("RemainAfterExit=yes", content)
        self.assertIn("Requires=docker.service", content)
        self.assertIn(
            "ExecStart=/usr/bin/docker compose -f docker-compose.postgres.yml --env-file .env up -d", content)
        self.assertIn(
            "ExecStop=/usr/bin/docker compose -f docker-compose.postgres.yml --env-file .env down", content)
        self.assertIn(f"WorkingDirectory={self.profile.install_dir}", content)

    def test_native_unit(self):
        content = self.writer.render_native_unit()
        self.assertIn("Type=simple", content)
        self.assertIn("User=kutt", content)
        self.assertIn("Restart=on-failure", content)
        self.assertIn("RestartSec=5", content)
        self.assertIn("Environment=NODE_ENV=production", content)
        self.assertIn("ExecStart=/usr/bin/node server/index.js", content)

    def test_install_unit_reloads_and_enables(self):
        path = self.writer.install_unit(self.writer.render_native_unit(), start=True)
        self.assertEqual(path, self.profile.unit_path)
        self.assertEqual(stat.S_IMODE(os.stat(path).st_mode), 0o644)
        self.assertEqual(self.supervisor.calls, [
            ('daemon-reload', None), ('enable', 'kutt.service'), ('start', 'kutt.service'),
        ])

    def test_install_unit_is_idempotent(self):
        content = self.writer.render_container_unit("docker-compose.yml")
        self.writer.install_unit(content)
        self.writer.install_unit(content)
        self.assertEqual(self.profile.unit_path.read_text(), content)


class TestServiceActivator(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.profile = make_profile(Path(self.test_dir))
        self.profile.install_dir.mkdir(parents=True)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_container_sqlite(self):
        host = make_host()
        ServiceActivator(self.profile, host).activate(InstallConfig(domain="d", email="e"))
        self.assertEqual(host.docker.calls, [('up', 'docker-compose.yml')])
        self.assertIn("docker-compose.yml", self.profile.unit_path.read_text())
        self.assertNotIn(('start', 'kutt.service'), host.supervisor.calls)

    def test_container_postgres_uses_postgres_compose(self):
        host = make_host()
        ServiceActivator(self.profile, host).activate(
            InstallConfig(domain="d", email="e", db_backend=DbBackend.POSTGRES))
        self.assertEqual(host.docker.calls, [('up', 'docker-compose.postgres.yml')])

    def test_compose_failure_writes_no_unit(self):
        host = make_host(docker=FakeDocker(fail_compose_up=True))
        with self.assertRaises(ProvisioningError):
            ServiceActivator(self.profile, host).activate(InstallConfig(domain="d", email="e"))
        self.assertFalse(self.profile.unit_path.exists())

    def test_native(self):
        host = make_host(node=FakeNode(major=20), accounts=FakeAccounts())
        ServiceActivator(self.profile, host).activate(
            InstallConfig(domain="d", email="e", deploy_mode=DeployMode.NATIVE))

        self.assertEqual([c[0] for c in host.node.calls], ['npm install', 'npm migrate'])
        self.assertEqual(host.accounts.created, ['kutt'])
        self.assertEqual(host.accounts.chowned, [(self.profile.install_dir, 'kutt')])
        self.assertIn(('start', 'kutt.service'), host.supervisor.calls)

    def test_native_existing_user_not_recreated(self):
        host = make_host(node=FakeNode(major=20), accounts=FakeAccounts(users=['kutt']))
        ServiceActivator(self.profile, host).activate(
            InstallConfig(domain="d", email="e", deploy_mode=DeployMode.NATIVE))
        self.assertEqual(host.accounts.created, [])

    def test_migration_failure_is_fatal_before_unit(self):
        host = make_host(node=FakeNode(major=20, fail_migrate=True))
        with self.assertRaises(ProvisioningError):
            ServiceActivator(self.profile, host).activate(
                InstallConfig(domain="d", email="e", deploy_mode=DeployMode.NATIVE))
        self.assertFalse(self.profile.unit_path.exists())
        self.assertEqual(host.accounts.created, [])


if __name__ == '__main__':
    unittest.main()
