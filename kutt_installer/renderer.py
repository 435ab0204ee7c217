# Path and File Name : /home/kutt/kutt-installer/kutt_installer/renderer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Artifact renderer - commits the .env and activates the two-phase Nginx site with rollback to the last good config

"""
Artifact Renderer.

Site activation is write -> enable -> validate -> reload. When nginx rejects
the new text, the previous site text (and enabled state) is put back, so the
running proxy keeps serving the last configuration that passed `nginx -t`.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import EnvFileWriter
from .errors import ConfigValidationError
from .models import InstallConfig, Secrets
from .profile import InstallerProfile
from .proxy import render_http_site, render_https_site

logger = logging.getLogger(__name__)

SITE_MODE = 0o644


def _snapshot_link(link: Path) -> Optional[Tuple[str, Union[str, bytes]]]:
    """What sits at link now: a symlink target, a regular file's text, or None."""
    if link.is_symlink():
        return ('symlink', os.readlink(link))
    if link.exists():
        return ('file', link.read_bytes())
    return None


def _put_back(link: Path, snapshot: Optional[Tuple[str, Union[str, bytes]]]) -> None:
    if link.is_symlink() or link.exists():
        link.unlink()
    if snapshot is None:
        return
    kind, value = snapshot
    if kind == 'symlink':
        os.symlink(value, link)
    else:
        link.write_bytes(value)


def _link(target: Path, link: Path) -> None:
    if link.is_symlink() or link.exists():
        link.unlink()
    link.parent.mkdir(parents=True, exist_ok=True)
    os.symlink(target, link)


class ArtifactRenderer:
    """Writes the .env file and the reverse proxy site."""

    def __init__(self, profile: InstallerProfile, nginx):
        self.profile = profile
        self.nginx = nginx
        self.env_writer = EnvFileWriter(profile.env_file)

    def write_env(self, config: InstallConfig, secrets: Secrets) -> Path:
        path = self.env_writer.write_install(config, secrets, self.profile)
        logger.info(f"✓ .env created: {path}")
        return path

    def activate_site(self, content: str, disable_default: bool = False) -> Path:
        """
        Install content as the site config and make nginx serve it.

        Args:
            content: Site config text
            disable_default: Also drop the distribution's default site link

        Returns:
            Path of the site config

        Raises:
            ConfigValidationError: If `nginx -t` rejects the result (previous state restored)
        """
        site = self.profile.site_available
        link = self.profile.site_enabled
        default_link = self.profile.default_site_enabled

        previous: Optional[bytes] = site.read_bytes() if site.exists() else None
        previous_link = _snapshot_link(link)
        default_target: Optional[str] = None

        site.parent.mkdir(parents=True, exist_ok=True)
        site.write_text(content)
        os.chmod(site, SITE_MODE)
        _link(site, link)

        if disable_default and default_link.is_symlink():
            default_target = os.readlink(default_link)
            default_link.unlink()

        try:
            self.nginx.validate()
        except ConfigValidationError:
            self._restore(previous, previous_link, default_target)
            raise

        self.nginx.reload()
        return site

    def _restore(self, previous: Optional[bytes], previous_link: Optional[Tuple[str, Union[str, bytes]]],
                 default_target: Optional[str]) -> None:
        site = self.profile.site_available
        link = self.profile.site_enabled

        if previous is not None:
            site.write_bytes(previous)
            logger.warning(f"Rejected site config rolled back to previous {site}")
        else:
            site.unlink()
            logger.warning(f"Rejected site config {site} removed")
        _put_back(link, previous_link)
        if default_target is not None:
            os.symlink(default_target, self.profile.default_site_enabled)

    def apply_http_site(self, domain: str) -> Path:
        """Phase 1: serve the ACME challenge, replace the default site."""
        site = self.activate_site(render_http_site(domain, self.profile.acme_webroot), disable_default=True)
        logger.info("✓ Nginx configured for initial HTTP")
        return site

    def apply_https_site(self, domain: str) -> Path:
        """Phase 2: TLS reverse proxy using the issued certificate."""
        content = render_https_site(
            domain,
            self.profile.acme_webroot,
            self.profile.fullchain_path(domain),
            self.profile.privkey_path(domain),
            self.profile.app_name,
            self.profile.app_port,
        )
        site = self.activate_site(content)
        logger.info("✓ Nginx HTTPS configuration active")
        return site
