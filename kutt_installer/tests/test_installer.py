# Path and File Name : /home/kutt/kutt-installer/kutt_installer/tests/test_installer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: End-to-end installer tests against in-memory host capabilities

"""
Installer sequence tests.

All host paths live under a temp dir and every external tool is a fake, so
the full run is exercised without touching the machine.
"""

import json
import os
import shutil
import stat
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from kutt_installer import installer
from kutt_installer.config import read_env_file
from kutt_installer.errors import CertificateError, ConfigValidationError, InputValidationError, OperationCancelled
from kutt_installer.installer import KuttInstaller
from kutt_installer.tests.fakes import (
    FakeCertbot,
    FakeDocker,
    FakeNginx,
    ScriptedPrompter,
    certificate_writer,
    make_host,
    make_profile,
)

DOMAIN = "s.example.com"
DEFAULT_ANSWERS = [DOMAIN, "admin@example.com", "", "", "", "", "", ""]


class TestKuttInstaller(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.profile = make_profile(Path(self.test_dir))
        self.profile.nginx_sites_available.mkdir(parents=True)
        self.profile.nginx_sites_enabled.mkdir(parents=True)

        self.checkout = Path(self.test_dir) / "checkout"
        self.checkout.mkdir()
        (self.checkout / "package.json").write_text(json.dumps({"name": "kutt"}))
        (self.checkout / "docker-compose.yml").write_text("services: {}\n")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _host(self, **overrides):
        overrides.setdefault('certbot', FakeCertbot(issue=certificate_writer(self.profile)))
        return make_host(**overrides)

    def _installer(self, answers, host, source_dir=None):
        prompter = ScriptedPrompter(answers)
        return KuttInstaller(self.profile, host, prompter, source_dir=source_dir or self.checkout), prompter

    def test_full_container_install(self):
        host = self._host(docker=FakeDocker(available=False))
        install, prompter = self._installer(DEFAULT_ANSWERS, host)
        config = install.run()

        self.assertEqual(config.domain, DOMAIN)
        values = read_env_file(self.profile.env_file)
        self.assertEqual(values['DEFAULT_DOMAIN'], DOMAIN)
        self.assertEqual(values['DISALLOW_REGISTRATION'], "true")
        self.assertEqual(values['DB_CLIENT'], "better-sqlite3")
        self.assertEqual(values['MAIL_ENABLED'], "false")
        self.assertEqual(stat.S_IMODE(os.stat(self.profile.env_file).st_mode), 0o600)

        site = self.profile.site_available.read_text()
        self.assertIn("listen 443 ssl http2;", site)
        self.assertTrue(self.profile.site_enabled.is_symlink())
        self.assertTrue(self.profile.renewal_hook.exists())
        self.assertIn("Type=oneshot", self.profile.unit_path.read_text())
        self.assertIn(('up', 'docker-compose.yml'), host.docker.calls)
        self.assertIn("[9/9]", prompter.text)
        self.assertIn("Installation complete!", prompter.text)

    def test_blank_domain_touches_nothing(self):
        host = self._host()
        install, _ = self._installer([""], host)
        with self.assertRaises(InputValidationError):
            install.run()

        self.assertEqual(host.packages.calls, [])
        self.assertEqual(host.docker.calls, [])
        self.assertEqual(host.nginx.validations, 0)
        self.assertFalse(self.profile.install_dir.exists())
        self.assertFalse(self.profile.site_available.exists())

    def test_declined_summary_touches_nothing(self):
        host = self._host()
        answers = DEFAULT_ANSWERS[:-1] + ["n"]
        install, _ = self._installer(answers, host)
        with self.assertRaises(OperationCancelled) as ctx:
            install.run()
        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertEqual(host.packages.calls, [])
        self.assertFalse(self.profile.install_dir.exists())

    def test_secrets_generated_after_confirmation(self):
        calls = []

        def generator():
            calls.append(True)
            raise AssertionError("secrets must not be generated")

        install = KuttInstaller(self.profile, self._host(), ScriptedPrompter([""]), secret_generator=generator)
        with self.assertRaises(InputValidationError):
            install.run()
        self.assertEqual(calls, [])

    def test_certificate_failure_stops_before_https(self):
        host = self._host(certbot=FakeCertbot(fail_issue=True))
        install, _ = self._installer(DEFAULT_ANSWERS, host)
        with self.assertRaises(CertificateError):
            install.run()

        # Phase 1 stays in place, nothing after the certificate step ran
        self.assertNotIn("ssl_certificate", self.profile.site_available.read_text())
        self.assertFalse(self.profile.unit_path.exists())
        self.assertTrue(self.profile.env_file.exists())

    def test_phase_two_rejection_keeps_http_site(self):
        host = self._host(nginx=FakeNginx(verdicts=[True, False]))
        install, _ = self._installer(DEFAULT_ANSWERS, host)
        with self.assertRaises(ConfigValidationError):
            install.run()
        self.assertIn("return 301", self.profile.site_available.read_text())
        self.assertNotIn("ssl_certificate", self.profile.site_available.read_text())

    def test_existing_install_declined_exits_zero(self):
        self.profile.install_dir.mkdir(parents=True)
        self.profile.env_file.write_text(f"DEFAULT_DOMAIN={DOMAIN}\n")
        install, _ = self._installer(["n"], self._host())
        with self.assertRaises(OperationCancelled) as ctx:
            install.run()
        self.assertEqual(ctx.exception.exit_code, 0)

    def test_existing_install_is_backed_up(self):
        self.profile.install_dir.mkdir(parents=True)
        self.profile.env_file.write_text(f"DEFAULT_DOMAIN={DOMAIN}\n")
        install, _ = self._installer(["y"] + DEFAULT_ANSWERS, self._host())
        install.run()
        backups = self.profile.backup_dirs()
        self.assertEqual(len(backups), 1)
        self.assertTrue((backups[0] / ".env").exists())

    def test_native_install(self):
        host = self._host()
        host.node.major = 20
        answers = [DOMAIN, "admin@example.com", "2", "", "", "", ""]
        install, _ = self._installer(answers, host)
        install.run()
        self.assertIn("Type=simple", self.profile.unit_path.read_text())
        self.assertEqual(read_env_file(self.profile.env_file)['DB_FILENAME'], "db/data")
        self.assertEqual(host.docker.calls, [])

    def test_clone_when_no_source(self):
        host = self._host()
        install = KuttInstaller(self.profile, host, ScriptedPrompter(DEFAULT_ANSWERS))

        def clone(args, **kwargs):
            self.profile.install_dir.mkdir(parents=True)
            return original_run(args, **kwargs)
        original_run = host.runner.run
        host.runner.run = clone

        install.run()
        self.assertEqual(host.runner.commands[0][:2], ['git', 'clone'])


class TestInstallerMain(unittest.TestCase):

    def test_non_root_exits_one(self):
        with patch('kutt_installer.system.os_check.os.geteuid', return_value=1000):
            with self.assertRaises(SystemExit) as ctx:
                installer.main([])
        self.assertEqual(ctx.exception.code, 1)

    def test_cancel_exit_code_passes_through(self):
        with patch.object(installer, 'require_root'), \
                patch.object(installer, 'load_profile'), \
                patch.object(installer, 'setup_logging'), \
                patch.object(installer, 'Host'), \
                patch.object(installer, 'KuttInstaller') as installer_cls:
            installer_cls.return_value.run.side_effect = OperationCancelled("left unchanged", exit_code=0)
            with self.assertRaises(SystemExit) as ctx:
                installer.main([])
        self.assertEqual(ctx.exception.code, 0)


if __name__ == '__main__':
    unittest.main()
