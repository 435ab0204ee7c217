# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/supervisor.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: systemd service supervisor capability - unit lifecycle via systemctl

"""
Service Supervisor capability backed by systemctl.
"""

from .commands import CommandRunner


class SystemctlSupervisor:
    """Drives systemd units."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def daemon_reload(self) -> None:
        self.runner.run(['systemctl', 'daemon-reload'], timeout=30)

    def enable(self, unit: str) -> None:
        self.runner.run(['systemctl', 'enable', unit])

    def disable(self, unit: str) -> None:
        self.runner.run(['systemctl', 'disable', unit])

    def start(self, unit: str) -> None:
        self.runner.run(['systemctl', 'start', unit])

    def stop(self, unit: str) -> None:
        self.runner.run(['systemctl', 'stop', unit])

    def restart(self, unit: str) -> None:
        self.runner.run(['systemctl', 'restart', unit])

    def reload(self, unit: str) -> None:
        self.runner.run(['systemctl', 'reload', unit])

    def is_active(self, unit: str) -> bool:
        return self.runner.succeeds(['systemctl', 'is-active', '--quiet', unit])
