# Path and File Name : /home/kutt/kutt-installer/kutt_installer/tests/test_capabilities.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Tests for the production host capabilities - the commands they issue and how they read results

import shutil
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from kutt_installer.certs import CertbotClient
from kutt_installer.errors import CommandError, ConfigValidationError
from kutt_installer.proxy import NginxController
from kutt_installer.system import (
    AptPackageManager,
    CommandRunner,
    DockerEngine,
    Host,
    NodeRuntime,
    OSCheck,
    SystemctlSupervisor,
    UfwFirewall,
)
from kutt_installer.system.node import parse_node_major
from kutt_installer.tests.fakes import FakeRunner


def _completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess([], returncode, stdout, stderr)


class TestCommandRunner(unittest.TestCase):

    @patch('kutt_installer.system.commands.subprocess.run')
    def test_non_zero_raises(self, mock_run):
        mock_run.return_value = _completed(returncode=2, stderr="E: broken\n")
        with self.assertRaises(CommandError) as ctx:
            CommandRunner().run(['apt-get', 'install', 'x'])
        self.assertEqual(ctx.exception.returncode, 2)
        self.assertIn("E: broken", str(ctx.exception))

    @patch('kutt_installer.system.commands.subprocess.run')
    def test_check_false_returns_result(self, mock_run):
        mock_run.return_value = _completed(returncode=3)
        self.assertEqual(CommandRunner().run(['false'], check=False).returncode, 3)

    @patch('kutt_installer.system.commands.subprocess.run', side_effect=FileNotFoundError)
    def test_missing_binary(self, _):
        with self.assertRaises(CommandError) as ctx:
            CommandRunner().run(['nosuchtool'])
        self.assertEqual(ctx.exception.returncode, 127)
        self.assertEqual(CommandRunner().run(['nosuchtool'], check=False).returncode, 127)

    @patch('kutt_installer.system.commands.subprocess.run')
    def test_noninteractive_environment(self, mock_run):
        mock_run.return_value = _completed()
        CommandRunner().run(['apt-get', 'update'])
        self.assertEqual(mock_run.call_args.kwargs['env']['DEBIAN_FRONTEND'], 'noninteractive')


class TestCapabilities(unittest.TestCase):

    def test_apt_is_installed_reads_dpkg_status(self):
        runner = FakeRunner(responses={'dpkg-query -W -f=${Status} nginx': _completed("install ok installed")})
        packages = AptPackageManager(runner)
        self.assertTrue(packages.is_installed('nginx'))
        self.assertFalse(packages.is_installed('certbot'))
        self.assertEqual(packages.missing(['nginx', 'certbot']), ['certbot'])

    def test_apt_install_is_quiet_and_skips_empty(self):
        runner = FakeRunner()
        packages = AptPackageManager(runner)
        packages.install([])
        packages.install(['git'])
        self.assertEqual(runner.commands, [['apt-get', 'install', '-y', '-qq', 'git']])

    def test_systemctl_is_active(self):
        runner = FakeRunner(failing=['systemctl is-active --quiet kutt'])
        self.assertFalse(SystemctlSupervisor(runner).is_active('kutt'))
        self.assertTrue(SystemctlSupervisor(FakeRunner()).is_active('kutt'))

    def test_ufw_rule_detection(self):
        runner = FakeRunner(responses={'ufw status': _completed("Nginx Full   ALLOW   Anywhere\n")})
        firewall = UfwFirewall(runner)
        self.assertTrue(firewall.has_rule('Nginx Full'))
        self.assertFalse(firewall.has_rule('OpenSSH'))
        firewall.enable()
        self.assertEqual(runner.commands[-1], ['ufw', '--force', 'enable'])

    def test_docker_listing(self):
        runner = FakeRunner(responses={
            'docker ps -a --format': _completed("kutt-server-1\npostgres\nKutt-redis-1\n"),
            'docker images': _completed("kutt-server abc123\nnginx def456\nkutt-server abc123\n"),
        })
        docker = DockerEngine(runner)
        self.assertEqual(docker.container_names_matching('kutt'), ['kutt-server-1', 'Kutt-redis-1'])
        self.assertEqual(docker.images_matching('kutt'), ['abc123'])

    def test_docker_compose_commands(self):
        runner = FakeRunner()
        docker = DockerEngine(runner)
        docker.compose_up(Path('/opt/kutt'), 'docker-compose.yml')
        docker.compose_down(Path('/opt/kutt'), 'docker-compose.yml')
        self.assertEqual(runner.commands[0], [
            'docker', 'compose', '-f', 'docker-compose.yml', '--env-file', '.env', 'up', '-d', '--build'])
        self.assertEqual(runner.commands[1], [
            'docker', 'compose', '-f', '/opt/kutt/docker-compose.yml', 'down', '-v', '--remove-orphans'])

    def test_node_version(self):
        self.assertEqual(parse_node_major("v20.11.1\n"), 20)
        self.assertIsNone(parse_node_major("garbage"))
        runner = FakeRunner(available=['node'], responses={'node -v': _completed("v18.19.0\n")})
        self.assertEqual(NodeRuntime(runner).major_version(), 18)
        self.assertIsNone(NodeRuntime(FakeRunner()).major_version())

    def test_nginx_validate(self):
        runner = FakeRunner(responses={'nginx -t': _completed(returncode=1, stderr="emerg: unknown directive")})
        with self.assertRaises(ConfigValidationError) as ctx:
            NginxController(runner).validate()
        self.assertIn("unknown directive", str(ctx.exception))

    def test_certbot_certonly(self):
        runner = FakeRunner()
        CertbotClient(runner).certonly('s.example.com', 'a@b.c')
        self.assertEqual(runner.commands[0], [
            'certbot', 'certonly', '--nginx', '--non-interactive', '--agree-tos',
            '--email', 'a@b.c', '-d', 's.example.com'])

    def test_production_host_shares_runner(self):
        runner = FakeRunner()
        host = Host.production(runner)
        self.assertIs(host.packages.runner, runner)
        self.assertIs(host.certbot.runner, runner)
        self.assertIs(host.nginx.runner, runner)


class TestOSCheck(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.os_release = Path(self.test_dir) / "os-release"

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_ubuntu(self):
        self.os_release.write_text('ID=ubuntu\nPRETTY_NAME="Ubuntu 24.04 LTS"\n')
        supported, reason = OSCheck(self.os_release).is_supported()
        self.assertTrue(supported)
        self.assertIn("Ubuntu 24.04", reason)

    def test_derivative(self):
        self.os_release.write_text('ID=linuxmint\nID_LIKE="ubuntu debian"\n')
        self.assertTrue(OSCheck(self.os_release).is_supported()[0])

    def test_unsupported_or_missing(self):
        self.os_release.write_text('ID=fedora\n')
        self.assertFalse(OSCheck(self.os_release).is_supported()[0])
        self.assertFalse(OSCheck(Path(self.test_dir) / "absent").is_supported()[0])


if __name__ == '__main__':
    unittest.main()
