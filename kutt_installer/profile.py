# Path and File Name : /home/kutt/kutt-installer/kutt_installer/profile.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Loads and validates the installer profile (paths, package sets, app constants) from YAML

"""
Installer Profile: every path and constant the installer touches.

The packaged installer_profile.yaml holds the defaults. An operator profile
(--profile) is merged over it key by key. The merged document is validated
against profile_schema.json before any component sees it.
"""

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from .errors import ProfileError

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_PROFILE_PATH = DATA_DIR / "installer_profile.yaml"
PROFILE_SCHEMA_PATH = DATA_DIR / "profile_schema.json"


@dataclass(frozen=True)
class InstallerProfile:
    """Validated, immutable view of the installer profile."""

    app_name: str
    service_name: str
    service_user: str
    app_port: int
    repo_url: str
    node_min_major: int
    node_setup_url: str
    docker_install_url: str
    oidc_callback_path: str

    install_dir: Path
    nginx_sites_available: Path
    nginx_sites_enabled: Path
    nginx_site_name: str
    acme_webroot: Path
    letsencrypt_live: Path
    renewal_hook: Path
    systemd_dir: Path
    os_release: Path
    log_file: Path
    docker_data_dirs: List[Path]
    nodesource_list: Path

    compose_sqlite: str
    compose_postgres: str
    compose_cleanup: List[str]

    base_packages: List[str]
    compose_plugin_package: str
    docker_purge_packages: List[str]
    node_purge_packages: List[str]
    nginx_purge_packages: List[str]
    certbot_purge_packages: List[str]

    @property
    def env_file(self) -> Path:
        return self.install_dir / ".env"

    @property
    def site_available(self) -> Path:
        return self.nginx_sites_available / self.nginx_site_name

    @property
    def site_enabled(self) -> Path:
        return self.nginx_sites_enabled / self.nginx_site_name

    @property
    def default_site_available(self) -> Path:
        return self.nginx_sites_available / "default"

    @property
    def default_site_enabled(self) -> Path:
        return self.nginx_sites_enabled / "default"

    @property
    def unit_name(self) -> str:
        return f"{self.service_name}.service"

    @property
    def unit_path(self) -> Path:
        return self.systemd_dir / self.unit_name

    def certificate_dir(self, domain: str) -> Path:
        """Directory certbot keeps the live certificate for domain in."""
        return self.letsencrypt_live / domain

    def fullchain_path(self, domain: str) -> Path:
        return self.certificate_dir(domain) / "fullchain.pem"

    def privkey_path(self, domain: str) -> Path:
        return self.certificate_dir(domain) / "privkey.pem"

    def backup_dirs(self) -> List[Path]:
        """Install-dir backups left by earlier installer runs, oldest first."""
        parent = self.install_dir.parent
        if not parent.exists():
            return []
        prefix = f"{self.install_dir.name}.bak."
        return sorted(p for p in parent.iterdir() if p.name.startswith(prefix) and p.is_dir())


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ProfileError(f"Installer profile not found: {path}")
    except yaml.YAMLError as e:
        raise ProfileError(f"Installer profile {path} is not valid YAML: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProfileError(f"Installer profile {path} must be a mapping, got {type(data).__name__}")
    return data


def _load_schema() -> Dict[str, Any]:
    with open(PROFILE_SCHEMA_PATH, 'r') as f:
        return json.load(f)


def validate_profile_document(document: Dict[str, Any]) -> None:
    """
    Validate a merged profile document against the profile schema.

    Raises:
        ProfileError: If the document violates the schema
    """
    try:
        jsonschema.validate(instance=document, schema=_load_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ProfileError(f"Invalid installer profile at {location}: {e.message}")


def load_profile(profile_path: Optional[Path] = None,
                 overrides: Optional[Dict[str, Any]] = None) -> InstallerProfile:
    """
    Load the default profile, merge the operator profile and overrides, validate.

    Args:
        profile_path: Optional operator YAML merged over the packaged defaults
        overrides: Optional in-memory mapping merged last

    Returns:
        InstallerProfile

    Raises:
        ProfileError: If any document is unreadable or the result is invalid
    """
    document = _read_yaml(DEFAULT_PROFILE_PATH)
    if profile_path is not None:
        document = _deep_merge(document, _read_yaml(Path(profile_path)))
    if overrides:
        document = _deep_merge(document, overrides)

    validate_profile_document(document)

    app = document['app']
    paths = document['paths']
    compose = document['compose_files']
    packages = document['packages']

    return InstallerProfile(
        app_name=app['name'],
        service_name=app['service_name'],
        service_user=app['service_user'],
        app_port=app['port'],
        repo_url=app['repo_url'],
        node_min_major=app['node_min_major'],
        node_setup_url=app['node_setup_url'],
        docker_install_url=app['docker_install_url'],
        oidc_callback_path=app['oidc_callback_path'],
        install_dir=Path(paths['install_dir']),
        nginx_sites_available=Path(paths['nginx_sites_available']),
        nginx_sites_enabled=Path(paths['nginx_sites_enabled']),
        nginx_site_name=paths['nginx_site_name'],
        acme_webroot=Path(paths['acme_webroot']),
        letsencrypt_live=Path(paths['letsencrypt_live']),
        renewal_hook=Path(paths['renewal_hook']),
        systemd_dir=Path(paths['systemd_dir']),
        os_release=Path(paths['os_release']),
        log_file=Path(paths['log_file']),
        docker_data_dirs=[Path(p) for p in paths['docker_data_dirs']],
        nodesource_list=Path(paths['nodesource_list']),
        compose_sqlite=compose['sqlite'],
        compose_postgres=compose['postgres'],
        compose_cleanup=list(compose['cleanup']),
        base_packages=list(packages['base']),
        compose_plugin_package=packages['compose_plugin'],
        docker_purge_packages=list(packages['docker_purge']),
        node_purge_packages=list(packages['node_purge']),
        nginx_purge_packages=list(packages['nginx_purge']),
        certbot_purge_packages=list(packages['certbot_purge']),
    )
