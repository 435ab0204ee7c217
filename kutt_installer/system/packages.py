# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/packages.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: apt/dpkg package manager capability - presence checks, install, purge

"""
Package Manager capability backed by apt-get and dpkg-query.
"""

from typing import List

from .commands import CommandRunner

APT_QUIET = ['-y', '-qq']


class AptPackageManager:
    """Installs and removes Debian packages."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_installed(self, package: str) -> bool:
        result = self.runner.run(['dpkg-query', '-W', '-f=${Status}', package], check=False)
        return result.returncode == 0 and 'install ok installed' in result.stdout

    def has_command(self, name: str) -> bool:
        return self.runner.which(name) is not None

    def update(self) -> None:
        self.runner.run(['apt-get', 'update', '-qq'])

    def upgrade(self) -> None:
        self.runner.run(['apt-get', 'upgrade'] + APT_QUIET)

    def install(self, packages: List[str]) -> None:
        if packages:
            self.runner.run(['apt-get', 'install'] + APT_QUIET + list(packages))

    def purge(self, packages: List[str]) -> None:
        if packages:
            self.runner.run(['apt-get', 'purge'] + APT_QUIET + list(packages))

    def autoremove(self) -> None:
        self.runner.run(['apt-get', 'autoremove'] + APT_QUIET)

    def missing(self, packages: List[str]) -> List[str]:
        """Subset of packages that are not installed, in input order."""
        return [p for p in packages if not self.is_installed(p)]
