# Path and File Name : /home/kutt/kutt-installer/kutt_installer/tests/test_env_file.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests for .env rendering, parsing, permissions and OIDC block replacement

"""
Environment file tests: rendered keys, 0600 mode, unique keys after
repeated OIDC updates.
"""

import os
import shutil
import stat
import sys
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from kutt_installer.config import EnvFileWriter, parse_env, read_env_file, read_existing_config, render_install_env
from kutt_installer.config.env_file import duplicate_keys
from kutt_installer.models import DbBackend, DeployMode, InstallConfig, MailSettings, OIDCConfig, Secrets
from kutt_installer.tests.fakes import make_profile

SECRETS = Secrets(jwt_secret="jwt-secret-value", db_password="db-password-value")


class TestRenderInstallEnv(unittest.TestCase):
    """Rendering the install-time .env."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.profile = make_profile(Path(self.test_dir))

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_default_container_sqlite_install(self):
        config = InstallConfig(domain="s.example.com", email="admin@example.com")
        values = parse_env(render_install_env(config, SECRETS, self.profile))

        self.assertEqual(values['DEFAULT_DOMAIN'], "s.example.com")
        self.assertEqual(values['DISALLOW_REGISTRATION'], "true")
        self.assertEqual(values['DISALLOW_ANONYMOUS_LINKS'], "true")
        self.assertEqual(values['DB_CLIENT'], "better-sqlite3")
        self.assertEqual(values['DB_FILENAME'], "/var/lib/kutt/data.sqlite")
        self.assertEqual(values['MAIL_ENABLED'], "false")
        self.assertEqual(values['JWT_SECRET'], "jwt-secret-value")
        self.assertEqual(values['PORT'], "3000")
        self.assertEqual(values['TRUST_PROXY'], "true")
        mail_keys = [k for k in values if k.startswith("MAIL_") and k != "MAIL_ENABLED"]
        self.assertEqual(mail_keys, [])
        self.assertNotIn('DB_PASSWORD', values)

    def test_postgres_hosts_depend_on_mode(self):
        config = InstallConfig(domain="s.example.com", email="a@b.c", db_backend=DbBackend.POSTGRES)
        values = parse_env(render_install_env(config, SECRETS, self.profile))
        self.assertEqual(values['DB_CLIENT'], "pg")
        self.assertEqual(values['DB_HOST'], "postgres")
        self.assertEqual(values['REDIS_HOST'], "redis")
        self.assertEqual(values['DB_PASSWORD'], "db-password-value")

    def test_native_forces_sqlite_with_relative_path(self):
        config = InstallConfig(domain="s.example.com", email="a@b.c",
                               deploy_mode=DeployMode.NATIVE, db_backend=DbBackend.POSTGRES)
        self.assertTrue(config.db_backend_forced)
        values = parse_env(render_install_env(config, SECRETS, self.profile))
        self.assertEqual(values['DB_CLIENT'], "better-sqlite3")
        self.assertEqual(values['DB_FILENAME'], "db/data")

    def test_mail_block(self):
        mail = MailSettings(host="smtp.example.com", port=465, user="u", password="p",
                            from_address="noreply@s.example.com")
        config = InstallConfig(domain="s.example.com", email="a@b.c", mail=mail,
                               allow_registration=True, allow_anonymous_links=True)
        values = parse_env(render_install_env(config, SECRETS, self.profile))
        self.assertEqual(values['MAIL_ENABLED'], "true")
        self.assertEqual(values['MAIL_SECURE'], "true")
        self.assertEqual(values['MAIL_PORT'], "465")
        self.assertEqual(values['DISALLOW_REGISTRATION'], "false")
        self.assertEqual(values['DISALLOW_ANONYMOUS_LINKS'], "false")

    def test_header_carries_timestamp(self):
        config = InstallConfig(domain="s.example.com", email="a@b.c")
        text = render_install_env(config, SECRETS, self.profile, generated_at=datetime(2024, 1, 2, 3, 4, 5))
        self.assertTrue(text.startswith("# Kutt configuration - generated by installer on Tue Jan 02 03:04:05 2024"))
        self.assertEqual(duplicate_keys(text), [])


class TestEnvFileWriter(unittest.TestCase):
    """Writing and updating the .env on disk."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.env_path = Path(self.test_dir) / "opt" / "kutt" / ".env"
        self.writer = EnvFileWriter(self.env_path)

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _mode(self):
        return stat.S_IMODE(os.stat(self.env_path).st_mode)

    def test_write_is_owner_only(self):
        self.writer.write("A=1\n")
        self.assertEqual(self._mode(), 0o600)

    def test_write_rejects_duplicate_keys(self):
        with self.assertRaises(ValueError):
            self.writer.write("A=1\nA=2\n")
        self.assertFalse(self.env_path.exists())

    def test_oidc_update_twice_leaves_single_issuer(self):
        self.writer.write("# Kutt\nDEFAULT_DOMAIN=s.example.com\nJWT_SECRET=x\n")
        self.writer.apply_oidc(OIDCConfig(issuer="https://a.example.com", client_id="id", client_secret="s"))
        self.writer.apply_oidc(OIDCConfig(issuer="https://b.example.com", client_id="id", client_secret="s",
                                          disallow_login_form=True))

        lines = self.env_path.read_text().splitlines()
        issuers = [line for line in lines if line.startswith("OIDC_ISSUER=")]
        self.assertEqual(issuers, ["OIDC_ISSUER=https://b.example.com"])
        self.assertEqual(len([line for line in lines if line.startswith("# OIDC")]), 1)
        self.assertEqual(len([line for line in lines if line.startswith("DISALLOW_LOGIN_FORM")]), 1)

        values = read_env_file(self.env_path)
        self.assertEqual(values['DEFAULT_DOMAIN'], "s.example.com")
        self.assertEqual(values['DISALLOW_LOGIN_FORM'], "true")
        self.assertEqual(self._mode(), 0o600)

    def test_oidc_update_removes_operator_login_form_line(self):
        self.writer.write("DEFAULT_DOMAIN=s.example.com\nDISALLOW_LOGIN_FORM=true\nOIDC_SCOPE=openid\n")
        self.writer.apply_oidc(OIDCConfig(issuer="https://idp.example.com/", client_id="id", client_secret="s"))
        values = read_env_file(self.env_path)
        self.assertEqual(values['DISALLOW_LOGIN_FORM'], "false")
        self.assertEqual(values['OIDC_SCOPE'], "openid profile email")
        self.assertEqual(values['OIDC_ISSUER'], "https://idp.example.com")
        self.assertEqual(duplicate_keys(self.env_path.read_text()), [])

    def test_failed_rewrite_keeps_existing_file(self):
        self.writer.write("DEFAULT_DOMAIN=s.example.com\nJWT_SECRET=abc\n")
        with patch('kutt_installer.config.env_file.os.fsync',
                   side_effect=OSError(28, "No space left on device")):
            with self.assertRaises(OSError):
                self.writer.apply_oidc(OIDCConfig(issuer="https://idp.example.com", client_id="id",
                                                  client_secret="s"))

        self.assertEqual(self.env_path.read_text(), "DEFAULT_DOMAIN=s.example.com\nJWT_SECRET=abc\n")
        self.assertEqual(self._mode(), 0o600)
        # no temp file left beside .env
        self.assertEqual(os.listdir(self.env_path.parent), [".env"])

    def test_oidc_update_keeps_non_utf8_bytes(self):
        self.env_path.parent.mkdir(parents=True)
        self.env_path.write_bytes(b"DEFAULT_DOMAIN=s.example.com\nMAIL_PASSWORD=p\xe4ss\n")
        self.writer.apply_oidc(OIDCConfig(issuer="https://idp.example.com", client_id="id", client_secret="s"))

        raw = self.env_path.read_bytes()
        self.assertIn(b"MAIL_PASSWORD=p\xe4ss\n", raw)
        self.assertIn(b"OIDC_ISSUER=https://idp.example.com\n", raw)
        self.assertEqual(read_env_file(self.env_path)['DEFAULT_DOMAIN'], "s.example.com")


class TestReadExistingConfig(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.env_path = Path(self.test_dir) / ".env"

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_missing_file(self):
        existing = read_existing_config(self.env_path, 'OIDC_ENABLED', 'true')
        self.assertFalse(existing.present)
        self.assertFalse(existing.enabled)

    def test_flag_value_must_match(self):
        self.env_path.write_text("OIDC_ENABLED=false\n")
        self.assertFalse(read_existing_config(self.env_path, 'OIDC_ENABLED', 'true').enabled)
        self.env_path.write_text("OIDC_ENABLED=true\n")
        self.assertTrue(read_existing_config(self.env_path, 'OIDC_ENABLED', 'true').enabled)

    def test_non_utf8_bytes_do_not_break_detection(self):
        self.env_path.write_bytes(b"DEFAULT_DOMAIN=s.example.com\nOIDC_ENABLED=true\nMAIL_PASSWORD=p\xe4ss\n")
        self.assertEqual(read_existing_config(self.env_path, 'DEFAULT_DOMAIN').get('DEFAULT_DOMAIN'),
                         "s.example.com")
        self.assertTrue(read_existing_config(self.env_path, 'OIDC_ENABLED', 'true').enabled)

    def test_parse_skips_comments_and_keeps_last(self):
        values = parse_env("# c\n\nA=1\nB = two words\nA=3\nnot a pair\n")
        self.assertEqual(values, {'A': '3', 'B': 'two words'})


if __name__ == '__main__':
    unittest.main()
