# Path and File Name : /home/kutt/kutt-installer/kutt_installer/source.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Places the application source in the install dir - backup of previous install, local copy or git clone

"""
Application source placement.
"""

import json
import logging
import shutil
import time
from pathlib import Path
from typing import Optional

from .errors import CommandError, ProvisioningError
from .profile import InstallerProfile

logger = logging.getLogger(__name__)


def is_app_checkout(path: Path) -> bool:
    """True if path holds a package.json with a name."""
    manifest = Path(path) / "package.json"
    if not manifest.is_file():
        return False
    try:
        return bool(json.loads(manifest.read_text()).get("name"))
    except (ValueError, OSError, AttributeError):
        return False


class SourceDeployer:
    """Copies or clones the application into the install dir."""

    def __init__(self, profile: InstallerProfile, runner):
        self.profile = profile
        self.runner = runner

    def backup_existing(self) -> Optional[Path]:
        """Move an existing install dir aside to <dir>.bak.<unix-ts>."""
        install_dir = self.profile.install_dir
        if not install_dir.exists():
            return None
        backup = install_dir.with_name(f"{install_dir.name}.bak.{int(time.time())}")
        logger.warning(f"{install_dir} already exists. Backing up to {backup}")
        install_dir.rename(backup)
        return backup

    def deploy(self, source_dir: Optional[Path] = None) -> Path:
        """
        Args:
            source_dir: Local checkout to copy. Cloned from repo_url when None.

        Returns:
            The install dir

        Raises:
            ProvisioningError: If source_dir is not a checkout or the clone fails
        """
        install_dir = self.profile.install_dir
        self.backup_existing()
        install_dir.parent.mkdir(parents=True, exist_ok=True)

        if source_dir is not None:
            source_dir = Path(source_dir)
            if not is_app_checkout(source_dir):
                raise ProvisioningError(f"{source_dir} is not an application checkout (no package.json)")
            logger.info(f"Copying local repository to {install_dir}...")
            shutil.copytree(source_dir, install_dir, symlinks=True)
        else:
            logger.info(f"Cloning {self.profile.repo_url}...")
            try:
                self.runner.run(['git', 'clone', self.profile.repo_url, str(install_dir)])
            except CommandError as e:
                raise ProvisioningError(f"git clone failed: {e}")

        logger.info(f"✓ {self.profile.app_name} source ready")
        return install_dir
