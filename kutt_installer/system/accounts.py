# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/accounts.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: System account capability - unprivileged service user lifecycle and ownership

"""
Account capability: the dedicated service user for native deployments.
"""

import pwd
from pathlib import Path

from .commands import CommandRunner


class AccountManager:
    """Creates, removes and assigns ownership to system users."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def user_exists(self, name: str) -> bool:
        try:
            pwd.getpwnam(name)
            return True
        except KeyError:
            return False

    def create_system_user(self, name: str) -> None:
        self.runner.run([
            'useradd', '--system', '--no-create-home',
            '--shell', '/usr/sbin/nologin', name,
        ])

    def delete_user(self, name: str) -> None:
        self.runner.run(['userdel', name])

    def chown_recursive(self, path: Path, user: str) -> None:
        self.runner.run(['chown', '-R', f"{user}:{user}", str(path)])
