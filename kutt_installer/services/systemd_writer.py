# Path and File Name : /home/kutt/kutt-installer/kutt_installer/services/systemd_writer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Writes the Kutt systemd unit - oneshot compose wrapper for Docker, simple node service for native

"""
Systemd Writer: renders and installs the persistent service definition.

Container mode wraps `docker compose up -d` / `down` in a oneshot unit that
stays active after start. Native mode runs node directly as the unprivileged
service user.
"""

import logging
import os
from pathlib import Path

from ..profile import InstallerProfile
from ..system.containers import DockerEngine

logger = logging.getLogger(__name__)

UNIT_MODE = 0o644
DOCKER_BIN = "/usr/bin/docker"
NODE_BIN = "/usr/bin/node"
NODE_ENTRYPOINT = "server/index.js"


class SystemdWriter:
    """Writes the application's systemd unit."""

    def __init__(self, profile: InstallerProfile, supervisor):
        self.profile = profile
        self.supervisor = supervisor

    def render_container_unit(self, compose_file: str) -> str:
        """
        Generate the oneshot unit driving docker compose.

        Args:
            compose_file: Compose file name relative to the install dir

        Returns:
            Unit content
        """
        compose = " ".join([DOCKER_BIN] + DockerEngine.compose_args(compose_file)[1:])
        return f"""[Unit]
Description={self.profile.app_name} URL Shortener (Docker)
Requires=docker.service
After=docker.service network-online.target
Wants=network-online.target

[Service]
Type=oneshot
RemainAfterExit=yes
WorkingDirectory={self.profile.install_dir}
ExecStart={compose} up -d
ExecStop={compose} down
TimeoutStartSec=120

[Install]
WantedBy=multi-user.target
"""

    def render_native_unit(self) -> str:
        user = self.profile.service_user
        return f"""[Unit]
Description={self.profile.app_name} URL Shortener
After=network-online.target
Wants=network-online.target

[Service]
Type=simple
User={user}
Group={user}
WorkingDirectory={self.profile.install_dir}
ExecStart={NODE_BIN} {NODE_ENTRYPOINT}
Restart=on-failure
RestartSec=5
Environment=NODE_ENV=production

[Install]
WantedBy=multi-user.target
"""

    def write_unit(self, content: str) -> Path:
        unit_path = self.profile.unit_path
        unit_path.parent.mkdir(parents=True, exist_ok=True)
        with open(unit_path, 'w') as f:
            f.write(content)
        os.chmod(unit_path, UNIT_MODE)
        return unit_path

    def install_unit(self, content: str, start: bool = False) -> Path:
        """
        Write the unit, reload systemd and enable it (start on request).

        Raises:
            CommandError: If systemctl fails
        """
        unit_path = self.write_unit(content)
        unit = self.profile.unit_name
        self.supervisor.daemon_reload()
        self.supervisor.enable(unit)
        if start:
            self.supervisor.start(unit)
        logger.info(f"✓ {unit} installed and enabled" + (" and started" if start else ""))
        return unit_path
