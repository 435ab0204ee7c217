# Path and File Name : /home/kutt/kutt-installer/kutt_installer/provisioner.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Dependency provisioner - check-then-install of system packages, Docker, Compose, Node.js and firewall rules

"""
Dependency Provisioner.

Every dependency is checked first and installed only when absent, so a
re-run on a provisioned host performs no installs. Failures of required
dependencies raise ProvisioningError; firewall problems are warnings.
"""

import logging
from typing import List

from .errors import CommandError, ProvisioningError
from .models import DeployMode, InstallConfig
from .profile import InstallerProfile

logger = logging.getLogger(__name__)

FIREWALL_RULES = ['OpenSSH', 'Nginx Full']


class DependencyProvisioner:
    """Brings the host's prerequisites up to what the deploy mode needs."""

    def __init__(self, profile: InstallerProfile, host):
        self.profile = profile
        self.host = host

    def refresh_packages(self) -> None:
        """apt-get update + upgrade, once per install."""
        try:
            self.host.packages.update()
            self.host.packages.upgrade()
        except CommandError as e:
            raise ProvisioningError(f"Updating system packages failed: {e}")
        logger.info("✓ System packages updated")

    def ensure_base_packages(self) -> List[str]:
        """
        Install whichever base packages are missing.

        Returns:
            Packages that were installed by this call
        """
        missing = self.host.packages.missing(self.profile.base_packages)
        if not missing:
            logger.info("✓ Base dependencies already installed")
            return []
        try:
            self.host.packages.install(missing)
        except CommandError as e:
            raise ProvisioningError(f"Installing base dependencies failed: {e}")
        logger.info(f"✓ Installed: {', '.join(missing)}")
        return missing

    def ensure_docker(self) -> bool:
        """Returns True if Docker was installed by this call."""
        docker = self.host.docker
        if docker.is_available():
            logger.info("✓ Docker already installed")
            return False

        logger.info("Installing Docker...")
        try:
            docker.install(self.profile.docker_install_url)
            self.host.supervisor.enable("docker")
            self.host.supervisor.start("docker")
        except CommandError as e:
            raise ProvisioningError(f"Docker installation failed: {e}")
        if not docker.is_available():
            raise ProvisioningError("Docker installation finished but the docker binary is not on PATH")
        logger.info("✓ Docker installed")
        return True

    def ensure_compose(self) -> bool:
        """Returns True if the Compose plugin was installed by this call."""
        docker = self.host.docker
        if docker.compose_available():
            logger.info("✓ Docker Compose available")
            return False

        logger.info("Installing Docker Compose plugin...")
        try:
            self.host.packages.install([self.profile.compose_plugin_package])
        except CommandError as e:
            raise ProvisioningError(f"Docker Compose plugin installation failed: {e}")
        if not docker.compose_available():
            raise ProvisioningError("`docker compose` is still unavailable after installing the plugin")
        logger.info("✓ Docker Compose installed")
        return True

    def ensure_node(self) -> bool:
        """Returns True if Node.js was installed or upgraded by this call."""
        node = self.host.node
        minimum = self.profile.node_min_major
        major = node.major_version()
        if major is not None and major >= minimum:
            logger.info(f"✓ Node.js {node.version()} already installed")
            return False

        if major is None:
            logger.info(f"Installing Node.js {minimum} LTS...")
        else:
            logger.info(f"Node.js {major} is older than {minimum}, upgrading...")
        try:
            node.install_from_nodesource(self.profile.node_setup_url)
        except CommandError as e:
            raise ProvisioningError(f"Node.js installation failed: {e}")

        major = node.major_version()
        if major is None or major < minimum:
            raise ProvisioningError(f"Node.js >= {minimum} required after install, found {node.version()}")
        logger.info(f"✓ Node.js {node.version()} installed")
        return True

    def configure_firewall(self) -> None:
        """Allow SSH and HTTP/HTTPS and enable ufw. Never fatal."""
        firewall = self.host.firewall
        if not firewall.is_available():
            logger.warning("ufw not found, firewall not configured")
            return
        try:
            for rule in FIREWALL_RULES:
                firewall.allow(rule)
            firewall.enable()
        except CommandError as e:
            logger.warning(f"Firewall configuration incomplete: {e}")
            return
        logger.info("✓ Firewall configured (SSH + HTTP/HTTPS)")

    def provision(self, config: InstallConfig) -> None:
        """Packages and runtime for config.deploy_mode."""
        self.refresh_packages()
        self.ensure_base_packages()
        if config.deploy_mode is DeployMode.CONTAINER:
            self.ensure_docker()
            self.ensure_compose()
        else:
            self.ensure_node()
