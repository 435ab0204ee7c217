# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/firewall.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: UFW firewall capability - allow/delete application profiles and enable

"""
Firewall capability backed by ufw.
"""

from .commands import CommandRunner


class UfwFirewall:
    """Manages ufw application rules."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_available(self) -> bool:
        return self.runner.which('ufw') is not None

    def allow(self, rule: str) -> None:
        self.runner.run(['ufw', 'allow', rule])

    def enable(self) -> None:
        self.runner.run(['ufw', '--force', 'enable'])

    def has_rule(self, rule: str) -> bool:
        result = self.runner.run(['ufw', 'status'], check=False)
        return result.returncode == 0 and rule in result.stdout

    def delete_allow(self, rule: str) -> None:
        self.runner.run(['ufw', 'delete', 'allow', rule])
