# Path and File Name : /home/kutt/kutt-installer/kutt_installer/oidc_configurator.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: OIDC reconfiguration - detect, prompt, confirm, rewrite the .env OIDC block, restart Kutt

"""
OIDC Configurator: points an existing Kutt install at an OpenID Connect
provider. Only the OIDC block of .env is rewritten; every other line is
kept in place.
"""

import logging

from .cli import build_parser, run_entry_point
from .collector import collect_oidc_config, confirm_oidc
from .config import EnvFileWriter, read_existing_config
from .errors import CommandError, OperationCancelled, PreconditionError
from .log import setup_logging
from .models import OIDCConfig
from .profile import InstallerProfile, load_profile
from .prompts import Prompter
from .system import Host, require_root

logger = logging.getLogger(__name__)

PROVIDER_NOTES = [
    "Keycloak: Create a client with 'confidential' access type",
    "Authentik: Create an OAuth2/OIDC provider and application",
    "Google: Set up in Google Cloud Console > APIs & Services > Credentials",
    "Microsoft: Register in Azure Portal > App registrations",
]


class OIDCConfigurator:
    """Detect -> prompt -> confirm -> rewrite -> restart."""

    def __init__(self, profile: InstallerProfile, host: Host, prompter: Prompter):
        self.profile = profile
        self.host = host
        self.prompter = prompter

    def check_install(self) -> None:
        """
        Raises:
            PreconditionError: If the install dir or its .env is missing
        """
        install_dir = self.profile.install_dir
        if not install_dir.is_dir():
            raise PreconditionError(
                f"{self.profile.app_name} installation not found at {install_dir}. Run kutt-install first.")
        if not self.profile.env_file.is_file():
            raise PreconditionError(f".env file not found at {self.profile.env_file}.")

    def callback_url(self) -> str:
        domain = read_existing_config(self.profile.env_file, 'DEFAULT_DOMAIN').get('DEFAULT_DOMAIN').strip()
        return f"https://{domain}{self.profile.oidc_callback_path}"

    def restart_service(self) -> bool:
        """Restart the unit if it is running. Returns True when restarted."""
        supervisor = self.host.supervisor
        service = self.profile.service_name
        if supervisor.is_active(service):
            try:
                supervisor.restart(service)
            except CommandError as e:
                logger.warning(f"Restart of {service} failed, restart it manually: {e}")
                return False
            logger.info(f"✓ {service} service restarted")
            return True

        logger.warning(f"{service} systemd service not found or not running.")
        self.prompter.say("  If using Docker manually, restart with:")
        self.prompter.say(f"    cd {self.profile.install_dir} && docker compose down && docker compose up -d")
        self.prompter.say("  If using native Node.js manually, restart the process.")
        return False

    def run(self) -> OIDCConfig:
        """
        Raises:
            PreconditionError: If there is no install to configure
            OperationCancelled: If the operator declines
            InputValidationError: If a required field is blank
        """
        self.check_install()

        say = self.prompter.say
        say("")
        say("=" * 40)
        say(f"  {self.profile.app_name} - OIDC Configuration")
        say("=" * 40)
        say("")

        env_file = self.profile.env_file
        if read_existing_config(env_file, 'OIDC_ENABLED', 'true').enabled:
            logger.warning(f"OIDC is already enabled in {env_file}.")
            if not self.prompter.confirm("Reconfigure?", default=False):
                raise OperationCancelled("Exiting.", exit_code=0)

        config = collect_oidc_config(self.prompter)
        confirm_oidc(self.prompter, config)

        logger.info(f"Updating {env_file}...")
        EnvFileWriter(env_file).apply_oidc(config)
        logger.info("✓ .env updated")

        logger.info(f"Restarting {self.profile.app_name}...")
        self.restart_service()
        self._summary()
        return config

    def _summary(self) -> None:
        say = self.prompter.say
        say("")
        say("=" * 40)
        say("  OIDC configured successfully!")
        say("=" * 40)
        say("")
        say("  Make sure your OIDC provider is configured with:")
        say("")
        say("  Redirect / Callback URL:")
        say(f"    {self.callback_url()}")
        say("")
        say(f"  If the callback URL above doesn't work, check {self.profile.app_name}'s")
        say("  documentation or logs for the exact callback path.")
        say("")
        say("  Provider-specific notes:")
        for note in PROVIDER_NOTES:
            say(f"  - {note}")
        say("")
        say(f"  View logs:  journalctl -u {self.profile.service_name} -f")
        say(f"              cd {self.profile.install_dir} && docker compose logs -f")
        say("")


def main(argv=None):
    """CLI entry point for kutt-configure-oidc."""
    args = build_parser("Configure OpenID Connect login for an installed Kutt.").parse_args(argv)

    def _configure():
        require_root()
        profile = load_profile(args.profile)
        setup_logging(args.log_file or profile.log_file, verbose=args.verbose)
        OIDCConfigurator(profile, Host.production(), Prompter()).run()

    setup_logging(verbose=args.verbose)
    run_entry_point("OIDC configuration", _configure)


if __name__ == '__main__':
    main()
