# Path and File Name : /home/kutt/kutt-installer/kutt_installer/installer.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Main installer - collects configuration and runs the ordered provisioning sequence end to end

"""
Kutt Installer: single authoritative install sequence.

Collection -> secrets -> dependencies -> source -> .env -> firewall ->
HTTP site -> certificate -> HTTPS site -> service. Every step raises on
failure and the run stops there; completed steps are not rolled back.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from .certs import CertificateProvisioner
from .cli import build_parser, run_entry_point
from .collector import collect_install_config, confirm_install
from .config import read_existing_config
from .crypto import generate_secrets
from .errors import OperationCancelled
from .log import setup_logging
from .models import DeployMode, InstallConfig, Secrets
from .profile import InstallerProfile, load_profile
from .prompts import Prompter
from .provisioner import DependencyProvisioner
from .renderer import ArtifactRenderer
from .runtime import ServiceActivator
from .source import SourceDeployer
from .system import Host, OSCheck, require_root

logger = logging.getLogger(__name__)

TOTAL_STEPS = 9


class KuttInstaller:
    """Installs Kutt behind Nginx with a Let's Encrypt certificate."""

    def __init__(self, profile: InstallerProfile, host: Host, prompter: Prompter,
                 source_dir: Optional[Path] = None,
                 secret_generator: Callable[[], Secrets] = generate_secrets):
        self.profile = profile
        self.host = host
        self.prompter = prompter
        self.source_dir = source_dir
        self.secret_generator = secret_generator

        self.provisioner = DependencyProvisioner(profile, host)
        self.source = SourceDeployer(profile, host.runner)
        self.renderer = ArtifactRenderer(profile, host.nginx)
        self.certificates = CertificateProvisioner(profile, host.certbot, host.supervisor)
        self.activator = ServiceActivator(profile, host)

    def _step(self, number: int, title: str) -> None:
        self.prompter.say(f"\n[{number}/{TOTAL_STEPS}] {title}...")

    def _check_os(self) -> None:
        supported, reason = OSCheck(self.profile.os_release).is_supported()
        if supported:
            logger.info(f"✓ {reason}")
        else:
            logger.warning(reason)

    def _check_existing(self) -> None:
        existing = read_existing_config(self.profile.env_file, 'DEFAULT_DOMAIN')
        if not existing.enabled:
            return
        logger.warning(f"An existing installation for {existing.get('DEFAULT_DOMAIN')} "
                       f"was found at {self.profile.install_dir}.")
        self.prompter.say(f"  Continuing moves it to {self.profile.install_dir}.bak.<timestamp> "
                          f"and installs from scratch.")
        if not self.prompter.confirm("Reinstall?", default=False):
            raise OperationCancelled("Existing installation left unchanged.", exit_code=0)

    def _banner(self) -> None:
        self.prompter.say("")
        self.prompter.say("=" * 40)
        self.prompter.say(f"  {self.profile.app_name} URL Shortener - Server Installer")
        self.prompter.say("=" * 40)
        self.prompter.say("")

    def collect(self) -> InstallConfig:
        """Interactive part of the run; touches nothing on disk."""
        self._banner()
        self._check_os()
        self._check_existing()
        config = collect_install_config(self.prompter)
        confirm_install(self.prompter, config, self.profile)
        return config

    def run(self) -> InstallConfig:
        """
        SINGLE AUTHORITATIVE INSTALLER ENTRYPOINT.

        Raises:
            OperationCancelled: If the operator declines
            InstallerError: If any step fails
        """
        config = self.collect()
        secrets = self.secret_generator()

        self._step(1, "Installing system packages")
        self.provisioner.refresh_packages()
        self.provisioner.ensure_base_packages()

        if config.deploy_mode is DeployMode.CONTAINER:
            self._step(2, "Installing Docker")
            self.provisioner.ensure_docker()
            self.provisioner.ensure_compose()
        else:
            self._step(2, "Installing Node.js")
            self.provisioner.ensure_node()

        self._step(3, f"Setting up {self.profile.app_name} in {self.profile.install_dir}")
        self.source.deploy(self.source_dir)

        self._step(4, "Writing .env configuration")
        self.renderer.write_env(config, secrets)

        self._step(5, "Configuring firewall")
        self.provisioner.configure_firewall()

        self._step(6, "Configuring Nginx for initial HTTP")
        self.renderer.apply_http_site(config.domain)

        self._step(7, "Obtaining Let's Encrypt SSL certificate")
        self.certificates.obtain(config.domain, config.email)
        self.certificates.configure_renewal()

        self._step(8, "Updating Nginx with full HTTPS configuration")
        self.renderer.apply_https_site(config.domain)

        self._step(9, f"Starting {self.profile.app_name}")
        self.activator.activate(config)

        self._summary(config)
        return config

    def _summary(self, config: InstallConfig) -> None:
        say = self.prompter.say
        install_dir = self.profile.install_dir
        service = self.profile.service_name

        say("")
        say("=" * 40)
        say("  Installation complete!")
        say("=" * 40)
        say("")
        say(f"  URL:          https://{config.domain}")
        say(f"  Install dir:  {install_dir}")
        say(f"  Config file:  {self.profile.env_file}")
        say("")
        say("  On first visit, you'll be prompted to create an admin account.")
        say("")
        say("  Useful commands:")
        if config.deploy_mode is DeployMode.CONTAINER:
            say(f"    View logs:     cd {install_dir} && docker compose logs -f")
        else:
            say(f"    View logs:     journalctl -u {service} -f")
        say(f"    Restart:       systemctl restart {service}")
        say(f"    Stop:          systemctl stop {service}")
        say("    SSL renewal:   certbot renew --dry-run")
        say(f"    Edit config:   nano {self.profile.env_file}")
        say("")
        if config.allow_registration:
            logger.warning("After creating your admin account, consider setting "
                           "DISALLOW_REGISTRATION=true in .env.")


def main(argv=None):
    """CLI entry point for kutt-install."""
    args = build_parser("Install Kutt on an Ubuntu/Debian server.", with_source=True).parse_args(argv)

    def _install():
        require_root()
        profile = load_profile(args.profile)
        setup_logging(args.log_file or profile.log_file, verbose=args.verbose)
        KuttInstaller(profile, Host.production(), Prompter(), source_dir=args.source).run()

    setup_logging(verbose=args.verbose)
    run_entry_point("Installation", _install)


if __name__ == '__main__':
    main()
