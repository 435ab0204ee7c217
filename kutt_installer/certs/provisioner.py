# Path and File Name : /home/kutt/kutt-installer/kutt_installer/certs/provisioner.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Obtains and verifies the Let's Encrypt certificate, configures renewal timer and nginx reload hook

"""
Certificate Provisioner.

Issuance only happens once the HTTP-only site is live (phase 1), since the
challenge is answered through nginx. The issued certificate is inspected
before phase 2 may reference it.
"""

import logging
import os
from pathlib import Path

from ..crypto import CertificateInfo, inspect_certificate
from ..errors import CertificateError, CommandError
from ..profile import InstallerProfile

logger = logging.getLogger(__name__)

RENEWAL_TIMER = "certbot.timer"
HOOK_MODE = 0o755


def render_renewal_hook() -> str:
    return "#!/bin/bash\nsystemctl reload nginx\n"


class CertificateProvisioner:
    """Issues the certificate for the install domain and sets up renewal."""

    def __init__(self, profile: InstallerProfile, certbot, supervisor):
        self.profile = profile
        self.certbot = certbot
        self.supervisor = supervisor

    def obtain(self, domain: str, email: str) -> CertificateInfo:
        """
        Issue a certificate for domain and verify what landed on disk.

        Args:
            domain: Certificate name
            email: ACME account contact

        Returns:
            CertificateInfo for the issued leaf

        Raises:
            CertificateError: If certbot fails or the certificate is unusable
        """
        logger.info(f"Requesting certificate for {domain} (agreeing to the Let's Encrypt terms of service)")
        try:
            self.certbot.certonly(domain, email)
        except CommandError as e:
            raise CertificateError(f"Certificate issuance for {domain} failed: {e}")

        info = inspect_certificate(self.profile.fullchain_path(domain), domain)
        logger.info(f"✓ Certificate for {domain} valid until {info.not_after:%Y-%m-%d}")
        return info

    def configure_renewal(self) -> Path:
        """
        Enable the renewal timer (best effort) and install the nginx reload hook.

        Returns:
            Path of the deploy hook
        """
        for action in (self.supervisor.enable, self.supervisor.start):
            try:
                action(RENEWAL_TIMER)
            except CommandError as e:
                logger.warning(f"Could not {action.__name__} {RENEWAL_TIMER}: {e}")

        hook = self.profile.renewal_hook
        hook.parent.mkdir(parents=True, exist_ok=True)
        content = render_renewal_hook()
        if not hook.exists() or hook.read_text() != content:
            hook.write_text(content)
        os.chmod(hook, HOOK_MODE)
        logger.info(f"✓ Renewal hook installed: {hook}")
        return hook
