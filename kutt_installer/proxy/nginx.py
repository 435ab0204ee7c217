# Path and File Name : /home/kutt/kutt-installer/kutt_installer/proxy/nginx.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Nginx reverse proxy capability - config test and reload

"""
Reverse Proxy capability backed by nginx and systemctl.
"""

import logging

from ..errors import CommandError, ConfigValidationError
from ..system.commands import CommandRunner

logger = logging.getLogger(__name__)


class NginxController:
    """Validates and reloads the running nginx."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_available(self) -> bool:
        return self.runner.which('nginx') is not None

    def validate(self) -> None:
        """
        Run `nginx -t` against the whole configuration tree.

        Raises:
            ConfigValidationError: If nginx rejects the configuration
        """
        result = self.runner.run(['nginx', '-t'], check=False)
        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            raise ConfigValidationError(f"nginx -t failed: {output}")

    def reload(self) -> None:
        try:
            self.runner.run(['systemctl', 'reload', 'nginx'])
        except CommandError as e:
            raise ConfigValidationError(f"nginx reload failed: {e}")
