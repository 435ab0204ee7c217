# Path and File Name : /home/kutt/kutt-installer/kutt_installer/certs/certbot.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Certificate authority client capability - certbot issue, revoke and delete

"""
Certificate Authority Client capability backed by certbot.
"""

from pathlib import Path

from ..system.commands import CommandRunner


class CertbotClient:
    """Runs certbot non-interactively."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_available(self) -> bool:
        return self.runner.which('certbot') is not None

    def certonly(self, domain: str, email: str) -> None:
        self.runner.run([
            'certbot', 'certonly',
            '--nginx',
            '--non-interactive',
            '--agree-tos',
            '--email', email,
            '-d', domain,
        ])

    def revoke(self, cert_path: Path) -> None:
        self.runner.run([
            'certbot', 'revoke',
            '--cert-path', str(cert_path),
            '--non-interactive',
            '--no-delete-after-revoke',
        ])

    def delete(self, cert_name: str) -> None:
        self.runner.run(['certbot', 'delete', '--cert-name', cert_name, '--non-interactive'])
