# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/node.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Node.js runtime capability - version detection, NodeSource install, npm build steps

"""
Language Runtime capability for native deployments (Node.js + npm).
"""

import re
from pathlib import Path
from typing import Optional

from .commands import CommandRunner

_VERSION_RE = re.compile(r'^v?(\d+)\.')


def parse_node_major(version_output: str) -> Optional[int]:
    """'v20.11.1' -> 20; None when unparsable."""
    match = _VERSION_RE.match(version_output.strip())
    return int(match.group(1)) if match else None


class NodeRuntime:
    """Detects and installs Node.js and runs npm inside the app directory."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def version(self) -> Optional[str]:
        if self.runner.which('node') is None:
            return None
        result = self.runner.run(['node', '-v'], check=False)
        return result.stdout.strip() if result.returncode == 0 else None

    def major_version(self) -> Optional[int]:
        version = self.version()
        return parse_node_major(version) if version else None

    def is_available(self) -> bool:
        return self.runner.which('node') is not None

    def install_from_nodesource(self, setup_url: str) -> None:
        self.runner.run_shell(f"curl -fsSL {setup_url} | bash -")
        self.runner.run(['apt-get', 'install', '-y', '-qq', 'nodejs'])

    def npm_install_production(self, app_dir: Path) -> None:
        self.runner.run(['npm', 'install', '--production'], cwd=app_dir)

    def npm_migrate(self, app_dir: Path) -> None:
        self.runner.run(['npm', 'run', 'migrate'], cwd=app_dir)
