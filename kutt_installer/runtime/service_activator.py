# Path and File Name : /home/kutt/kutt-installer/kutt_installer/runtime/service_activator.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Starts Kutt in the chosen deploy mode and registers it with systemd

"""
Service Activator.

Container mode: compose up with the backend's compose file, then a oneshot
unit so the stack comes back on boot. Native mode: npm install + migrate
(both fatal, before any unit exists), dedicated service user, ownership,
then a simple unit that is enabled and started.
"""

import logging
from pathlib import Path

from ..errors import CommandError, ProvisioningError
from ..models import DbBackend, DeployMode, InstallConfig
from ..profile import InstallerProfile
from ..services import SystemdWriter

logger = logging.getLogger(__name__)


class ServiceActivator:
    """Brings the application up and makes it persistent."""

    def __init__(self, profile: InstallerProfile, host, systemd_writer: SystemdWriter = None):
        self.profile = profile
        self.host = host
        self.systemd_writer = systemd_writer or SystemdWriter(profile, host.supervisor)

    def compose_file_for(self, config: InstallConfig) -> str:
        if config.db_backend is DbBackend.POSTGRES:
            return self.profile.compose_postgres
        return self.profile.compose_sqlite

    def activate(self, config: InstallConfig) -> Path:
        """
        Returns:
            Path of the installed unit

        Raises:
            ProvisioningError: If the build, migration or container start fails
        """
        if config.deploy_mode is DeployMode.CONTAINER:
            return self._activate_container(config)
        return self._activate_native()

    def _activate_container(self, config: InstallConfig) -> Path:
        compose_file = self.compose_file_for(config)
        logger.info(f"Starting {self.profile.app_name} with Docker Compose ({compose_file})...")
        try:
            self.host.docker.compose_up(self.profile.install_dir, compose_file, build=True)
        except CommandError as e:
            raise ProvisioningError(f"docker compose up failed: {e}")
        logger.info(f"✓ {self.profile.app_name} is running via Docker")

        return self.systemd_writer.install_unit(self.systemd_writer.render_container_unit(compose_file))

    def _activate_native(self) -> Path:
        app_dir = self.profile.install_dir
        user = self.profile.service_user

        logger.info("Installing Node.js dependencies...")
        try:
            self.host.node.npm_install_production(app_dir)
        except CommandError as e:
            raise ProvisioningError(f"npm install failed: {e}")

        logger.info("Running database migration...")
        try:
            self.host.node.npm_migrate(app_dir)
        except CommandError as e:
            raise ProvisioningError(f"Database migration failed: {e}")

        accounts = self.host.accounts
        if accounts.user_exists(user):
            logger.info(f"✓ System user '{user}' already exists")
        else:
            accounts.create_system_user(user)
            logger.info(f"✓ System user '{user}' created")
        accounts.chown_recursive(app_dir, user)

        unit_path = self.systemd_writer.install_unit(self.systemd_writer.render_native_unit(), start=True)
        logger.info(f"✓ {self.profile.app_name} is running as a systemd service")
        return unit_path
