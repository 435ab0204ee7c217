# Path and File Name : /home/kutt/kutt-installer/kutt_installer/uninstaller.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Teardown sequencer - nine independently confirmed, failure-isolated removal stages

"""
Teardown Sequencer.

Each stage detects its artifact, asks before acting and runs in isolation:
a failing stage is logged as a warning and the sequence continues. Stages
that only touch Kutt's own artifacts default to yes; stages that may affect
other services on the host default to no.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .cli import build_parser, run_entry_point
from .config import read_existing_config
from .errors import CommandError, ConfigValidationError, InstallerError, OperationCancelled
from .log import setup_logging
from .profile import InstallerProfile, load_profile
from .prompts import Prompter
from .proxy import parse_server_name
from .system import Host, require_root

logger = logging.getLogger(__name__)

FIREWALL_RULE = "Nginx Full"


class StageOutcome(Enum):
    REMOVED = "removed"
    SKIPPED = "skipped"
    ABSENT = "absent"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass
class StageResult:
    """What one teardown stage did."""
    name: str
    outcome: StageOutcome
    message: str = ""


class TeardownSequencer:
    """Removes what the installer created, one confirmed stage at a time."""

    def __init__(self, profile: InstallerProfile, host: Host, prompter: Prompter):
        self.profile = profile
        self.host = host
        self.prompter = prompter
        self.domain: Optional[str] = None
        self.results: List[StageResult] = []

    # Domain detection

    def detect_domain(self) -> Optional[str]:
        """DEFAULT_DOMAIN from .env, else the site's server_name, else None."""
        try:
            existing = read_existing_config(self.profile.env_file, 'DEFAULT_DOMAIN')
        except OSError as e:
            logger.warning(f"Cannot read {self.profile.env_file}: {e}")
        else:
            if existing.enabled:
                return existing.get('DEFAULT_DOMAIN').strip()

        site = self.profile.site_available
        try:
            if site.exists():
                return parse_server_name(site.read_text(errors='replace'))
        except OSError as e:
            logger.warning(f"Cannot read {site}: {e}")
        return None

    def resolve_domain(self) -> Optional[str]:
        domain = self.detect_domain()
        if domain:
            logger.info(f"Detected domain: {domain}")
            return domain
        answer = self.prompter.ask("Enter the domain used during install (for cert cleanup)")
        return answer.strip().rstrip('/') or None

    # Stage plumbing

    def _confirm(self, prompt: str, default: bool) -> bool:
        return self.prompter.confirm(f"  {prompt}", default=default)

    def run_stage(self, name: str, stage: Callable[[], StageResult]) -> StageResult:
        """Run one stage; any InstallerError or OSError becomes a FAILED result."""
        self.prompter.say("")
        try:
            result = stage()
        except (InstallerError, OSError) as e:
            logger.warning(f"{name}: {e}")
            result = StageResult(name, StageOutcome.FAILED, str(e))
        else:
            if result.outcome is StageOutcome.REMOVED:
                logger.info(f"✓ {result.message}")
            elif result.message:
                logger.info(result.message)
        self.results.append(result)
        return result

    # Stages

    def stage_service(self) -> StageResult:
        name = "systemd service"
        unit = self.profile.unit_name
        if not self.profile.unit_path.exists():
            return StageResult(name, StageOutcome.ABSENT, f"No {unit} found, skipping.")
        logger.info(f"Found {unit}.")
        if not self._confirm(f"Stop and remove the {unit} systemd service?", True):
            return StageResult(name, StageOutcome.DECLINED)

        supervisor = self.host.supervisor
        for action in (supervisor.stop, supervisor.disable):
            try:
                action(unit)
            except CommandError as e:
                logger.debug(f"{action.__name__} {unit}: {e}")
        self.profile.unit_path.unlink()
        supervisor.daemon_reload()
        return StageResult(name, StageOutcome.REMOVED, f"{unit} removed.")

    def stage_containers(self) -> StageResult:
        name = "docker"
        docker = self.host.docker
        if not docker.is_available():
            return StageResult(name, StageOutcome.ABSENT, "Docker not installed, skipping container cleanup.")

        needle = self.profile.service_name
        by_project = docker.containers_for_project(self.profile.install_dir)
        by_name = docker.container_names_matching(needle)
        if not by_project and not by_name:
            return StageResult(name, StageOutcome.ABSENT, f"No {self.profile.app_name} Docker containers found, skipping.")

        logger.info(f"Found {self.profile.app_name} Docker containers.")
        if not self._confirm("Stop and remove Docker containers, networks, and volumes?", True):
            return StageResult(name, StageOutcome.DECLINED)

        for compose_file in self.profile.compose_cleanup:
            if (self.profile.install_dir / compose_file).exists():
                try:
                    docker.compose_down(self.profile.install_dir, compose_file)
                except CommandError as e:
                    logger.warning(f"compose down ({compose_file}) failed: {e}")
        docker.remove_containers(docker.container_names_matching(needle))
        logger.info("✓ Docker containers and volumes removed.")

        images = docker.images_matching(needle)
        if images and self._confirm(f"Remove {self.profile.app_name} Docker images?", True):
            docker.remove_images(images)
            logger.info(f"✓ {len(images)} {self.profile.app_name} Docker image(s) removed.")
        return StageResult(name, StageOutcome.REMOVED, "Docker cleanup finished.")

    def stage_user(self) -> StageResult:
        name = "system user"
        user = self.profile.service_user
        if not self.host.accounts.user_exists(user):
            return StageResult(name, StageOutcome.ABSENT, f"No '{user}' system user found, skipping.")
        logger.info(f"Found '{user}' system user.")
        if not self._confirm(f"Remove the '{user}' system user?", True):
            return StageResult(name, StageOutcome.DECLINED)
        self.host.accounts.delete_user(user)
        return StageResult(name, StageOutcome.REMOVED, f"System user '{user}' removed.")

    def stage_nginx(self) -> StageResult:
        name = "nginx site"
        site = self.profile.site_available
        link = self.profile.site_enabled
        if not site.exists() and not link.is_symlink():
            return StageResult(name, StageOutcome.ABSENT, "No Nginx site configuration found, skipping.")
        logger.info("Found Nginx site configuration.")
        if not self._confirm("Remove Nginx site config and restore default?", True):
            return StageResult(name, StageOutcome.DECLINED)

        if link.is_symlink() or link.exists():
            link.unlink()
        if site.exists():
            site.unlink()

        default_site = self.profile.default_site_available
        default_link = self.profile.default_site_enabled
        if default_site.exists() and not default_link.is_symlink():
            os.symlink(default_site, default_link)

        try:
            self.host.nginx.validate()
        except ConfigValidationError as e:
            logger.warning("Nginx config test failed. You may need to fix /etc/nginx/ manually.")
            return StageResult(name, StageOutcome.FAILED, str(e))
        self.host.nginx.reload()
        return StageResult(name, StageOutcome.REMOVED, "Nginx configuration removed and reloaded.")

    def stage_certificate(self) -> StageResult:
        name = "certificate"
        if not self.domain:
            return StageResult(name, StageOutcome.SKIPPED, "No domain known, skipping certificate cleanup.")
        cert_dir = self.profile.certificate_dir(self.domain)
        if not cert_dir.is_dir():
            return StageResult(name, StageOutcome.ABSENT,
                               f"No Let's Encrypt certificate found for {self.domain}, skipping.")
        logger.info(f"Found Let's Encrypt certificate for {self.domain}.")
        if not self._confirm(f"Revoke and delete the SSL certificate for {self.domain}?", True):
            return StageResult(name, StageOutcome.DECLINED)

        try:
            self.host.certbot.revoke(self.profile.fullchain_path(self.domain))
        except CommandError as e:
            logger.warning(f"Certificate revocation failed (may already be revoked): {e}")
        self.host.certbot.delete(self.domain)
        return StageResult(name, StageOutcome.REMOVED, f"SSL certificate for {self.domain} revoked and deleted.")

    def stage_renewal_hook(self) -> StageResult:
        name = "renewal hook"
        hook = self.profile.renewal_hook
        if not hook.exists():
            return StageResult(name, StageOutcome.ABSENT, "No Certbot renewal hook found, skipping.")
        logger.info("Found Certbot renewal hook.")
        if not self._confirm("Remove the Certbot Nginx reload hook?", True):
            return StageResult(name, StageOutcome.DECLINED)
        hook.unlink()
        return StageResult(name, StageOutcome.REMOVED, "Certbot renewal hook removed.")

    def stage_firewall(self) -> StageResult:
        name = "firewall rule"
        firewall = self.host.firewall
        if not firewall.is_available() or not firewall.has_rule(FIREWALL_RULE):
            return StageResult(name, StageOutcome.ABSENT, "No Kutt-specific firewall rules found, skipping.")
        logger.info(f"Found UFW rule for '{FIREWALL_RULE}'.")
        if not self._confirm(f"Remove the '{FIREWALL_RULE}' firewall rule?", False):
            return StageResult(name, StageOutcome.DECLINED)
        firewall.delete_allow(FIREWALL_RULE)
        logger.warning("SSH rule was left in place. HTTP/HTTPS ports are now closed.")
        return StageResult(name, StageOutcome.REMOVED, "Firewall rule removed.")

    def stage_install_dir(self) -> StageResult:
        name = "install directory"
        install_dir = self.profile.install_dir
        outcome = StageOutcome.ABSENT
        messages = []

        if install_dir.exists():
            logger.info(f"Found installation at {install_dir}.")
            logger.warning(f"This will permanently delete all {self.profile.app_name} data including the database.")
            if self._confirm(f"Delete {install_dir} and all its contents?", False):
                shutil.rmtree(install_dir)
                outcome = StageOutcome.REMOVED
                messages.append(f"{install_dir} removed.")
            else:
                outcome = StageOutcome.DECLINED
                messages.append(f"Kept {install_dir} intact.")

        backups = self.profile.backup_dirs()
        if backups:
            self.prompter.say("Found installer backup(s):")
            for backup in backups:
                self.prompter.say(f"    {backup}")
            if self._confirm("Delete these backups too?", False):
                for backup in backups:
                    shutil.rmtree(backup)
                outcome = StageOutcome.REMOVED
                messages.append(f"{len(backups)} backup(s) removed.")
            elif outcome is StageOutcome.ABSENT:
                outcome = StageOutcome.DECLINED

        if outcome is StageOutcome.ABSENT:
            messages.append(f"No installation at {install_dir}, skipping.")
        return StageResult(name, outcome, " ".join(messages))

    def _purge(self, packages: List[str], units: List[str]) -> None:
        for unit in units:
            for action in (self.host.supervisor.stop, self.host.supervisor.disable):
                try:
                    action(unit)
                except CommandError as e:
                    logger.debug(f"{action.__name__} {unit}: {e}")
        self.host.packages.purge(packages)
        self.host.packages.autoremove()

    def _package_stage(self, label: str, command: str, note: str,
                       purge: Callable[[], None]) -> Callable[[], StageResult]:
        def stage() -> StageResult:
            name = f"package: {label}"
            if not self.host.packages.has_command(command):
                return StageResult(name, StageOutcome.ABSENT, f"{label} not installed, skipping.")
            if not self._confirm(f"Remove {label}? ({note})", False):
                return StageResult(name, StageOutcome.DECLINED)
            purge()
            return StageResult(name, StageOutcome.REMOVED, f"{label} removed.")
        return stage

    def _purge_docker(self) -> None:
        self._purge(self.profile.docker_purge_packages, ["docker"])
        for data_dir in self.profile.docker_data_dirs:
            if data_dir.exists():
                shutil.rmtree(data_dir)

    def _purge_node(self) -> None:
        self._purge(self.profile.node_purge_packages, [])
        if self.profile.nodesource_list.exists():
            self.profile.nodesource_list.unlink()

    def _purge_nginx(self) -> None:
        self._purge(self.profile.nginx_purge_packages, ["nginx"])

    def _purge_certbot(self) -> None:
        self._purge(self.profile.certbot_purge_packages, ["certbot.timer"])

    def package_stages(self):
        return [
            ("Docker", "docker", "skip if other services use it", self._purge_docker),
            ("Node.js", "node", "skip if other services use it", self._purge_node),
            ("Nginx", "nginx", "skip if other sites use it", self._purge_nginx),
            ("Certbot", "certbot", "skip if other certs use it", self._purge_certbot),
        ]

    # Sequence

    def stages(self):
        return [
            ("systemd service", self.stage_service),
            ("docker", self.stage_containers),
            ("system user", self.stage_user),
            ("nginx site", self.stage_nginx),
            ("certificate", self.stage_certificate),
            ("renewal hook", self.stage_renewal_hook),
            ("firewall rule", self.stage_firewall),
            ("install directory", self.stage_install_dir),
        ]

    def run(self) -> List[StageResult]:
        """
        Raises:
            OperationCancelled: If the operator declines the top-level confirmation
        """
        say = self.prompter.say
        say("")
        say("=" * 40)
        say(f"  {self.profile.app_name} URL Shortener - Uninstaller")
        say("=" * 40)
        say("")
        say(f"This will remove {self.profile.app_name} and its configuration from this server.")
        say("Each step will ask for confirmation before proceeding.")
        say("")

        self.domain = self.resolve_domain()

        say("")
        if not self.prompter.confirm("Proceed with uninstallation?", default=False):
            raise OperationCancelled("Uninstallation cancelled.", exit_code=1)

        for name, stage in self.stages():
            self.run_stage(name, stage)

        say("")
        logger.warning("The installer added these system packages. They may be used by other services.")
        for label, command, note, purge in self.package_stages():
            self.run_stage(f"package: {label}", self._package_stage(label, command, note, purge))

        self._summary()
        return self.results

    def _summary(self) -> None:
        say = self.prompter.say
        say("")
        say("=" * 40)
        say("  Uninstallation complete!")
        say("=" * 40)
        say("")
        say("  Summary:")
        for result in self.results:
            say(f"    {result.name:<18} {result.outcome.value}")
        if any(r.outcome in (StageOutcome.FAILED, StageOutcome.DECLINED) for r in self.results):
            say("")
            say("  If anything was skipped, you can re-run this command or clean up manually.")
        say("")


def main(argv=None):
    """CLI entry point for kutt-uninstall."""
    args = build_parser("Remove Kutt and its configuration from this server.").parse_args(argv)

    def _uninstall():
        require_root()
        profile = load_profile(args.profile)
        setup_logging(args.log_file or profile.log_file, verbose=args.verbose)
        TeardownSequencer(profile, Host.production(), Prompter()).run()

    setup_logging(verbose=args.verbose)
    run_entry_point("Uninstallation", _uninstall)


if __name__ == '__main__':
    main()
