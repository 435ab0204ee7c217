# Path and File Name : /home/kutt/kutt-installer/kutt_installer/config/env_file.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Renders, parses and writes the application .env file - owner-only permissions, unique keys

"""
Environment File: the persisted KEY=value configuration of the application.

Rendering is a pure function of the in-memory records. Writing always
leaves the file at mode 0600. Keys stay unique: the OIDC block update
deletes every matching line before appending the new block.
"""

import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..models import DbBackend, DeployMode, ExistingConfig, InstallConfig, OIDCConfig, Secrets
from ..profile import InstallerProfile

logger = logging.getLogger(__name__)

ENV_FILE_MODE = 0o600
# Operator edits may carry non-UTF-8 bytes (e.g. a Latin-1 password); they round-trip unchanged
ENV_ENCODING = 'utf-8'
ENV_ERRORS = 'surrogateescape'

# Lines removed before a fresh OIDC block is appended
OIDC_LINE_PATTERNS = [
    re.compile(r'^# OIDC'),
    re.compile(r'^OIDC_'),
    re.compile(r'^DISALLOW_LOGIN_FORM'),
]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _timestamp(generated_at: Optional[datetime]) -> str:
    return (generated_at or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")


def render_install_env(config: InstallConfig, secrets: Secrets, profile: InstallerProfile,
                       generated_at: Optional[datetime] = None) -> str:
    """
    Render the full .env for a fresh install.

    Args:
        config: Operator configuration
        secrets: Per-run secrets
        profile: Installer profile (app name and port)
        generated_at: Timestamp for the header comment (defaults to now)

    Returns:
        File content, newline terminated
    """
    docker = config.deploy_mode is DeployMode.CONTAINER

    lines = [
        f"# {profile.app_name} configuration - generated by installer on {_timestamp(generated_at)}",
        f"PORT={profile.app_port}",
        f"SITE_NAME={profile.app_name}",
        f"DEFAULT_DOMAIN={config.domain}",
        f"JWT_SECRET={secrets.jwt_secret}",
        "",
        "# Trust the Nginx reverse proxy",
        "TRUST_PROXY=true",
        "",
        "# Registration & anonymous links",
        f"DISALLOW_REGISTRATION={_bool(not config.allow_registration)}",
        f"DISALLOW_ANONYMOUS_LINKS={_bool(not config.allow_anonymous_links)}",
        "",
        "# Rate limiting",
        "ENABLE_RATE_LIMIT=true",
        "",
    ]

    if config.db_backend is DbBackend.POSTGRES:
        lines += [
            "# PostgreSQL",
            f"DB_CLIENT={DbBackend.POSTGRES.value}",
            f"DB_HOST={'postgres' if docker else 'localhost'}",
            "DB_PORT=5432",
            "DB_NAME=kutt",
            "DB_USER=kutt",
            f"DB_PASSWORD={secrets.db_password}",
            "DB_SSL=false",
            "DB_POOL_MIN=2",
            "DB_POOL_MAX=10",
            "",
            "# Redis",
            "REDIS_ENABLED=true",
            f"REDIS_HOST={'redis' if docker else '127.0.0.1'}",
            "REDIS_PORT=6379",
        ]
    else:
        lines += [
            "# SQLite",
            f"DB_CLIENT={DbBackend.SQLITE.value}",
            f"DB_FILENAME={'/var/lib/kutt/data.sqlite' if docker else 'db/data'}",
        ]

    lines.append("")
    if config.mail is not None:
        mail = config.mail
        lines += [
            "# Mail",
            "MAIL_ENABLED=true",
            f"MAIL_HOST={mail.host}",
            f"MAIL_PORT={mail.port}",
            f"MAIL_SECURE={_bool(mail.secure)}",
            f"MAIL_USER={mail.user}",
            f"MAIL_PASSWORD={mail.password}",
            f"MAIL_FROM={mail.from_address}",
        ]
    else:
        lines += [
            "# Mail disabled",
            "MAIL_ENABLED=false",
        ]

    return "\n".join(lines) + "\n"


def render_oidc_block(config: OIDCConfig, generated_at: Optional[datetime] = None) -> List[str]:
    """Render the OIDC block appended by the OIDC configurator."""
    return [
        f"# OIDC - configured on {_timestamp(generated_at)}",
        "OIDC_ENABLED=true",
        f"OIDC_ISSUER={config.issuer}",
        f"OIDC_CLIENT_ID={config.client_id}",
        f"OIDC_CLIENT_SECRET={config.client_secret}",
        f"OIDC_SCOPE={config.scope}",
        f"OIDC_EMAIL_CLAIM={config.email_claim}",
        f"DISALLOW_LOGIN_FORM={_bool(config.disallow_login_form)}",
    ]


def parse_env(text: str) -> Dict[str, str]:
    """
    Parse KEY=value lines. Comments and blank lines are skipped; a repeated
    key keeps its last value, as the application's dotenv loader would.
    """
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip()
    return values


def duplicate_keys(text: str) -> List[str]:
    """Keys that appear on more than one line."""
    seen = set()
    duplicates = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key = line.split("=", 1)[0].strip()
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


def read_env_file(path: Path) -> Dict[str, str]:
    """Read and parse an env file. Missing file raises FileNotFoundError."""
    return parse_env(Path(path).read_text(encoding=ENV_ENCODING, errors=ENV_ERRORS))


def read_existing_config(path: Path, flag_key: str, flag_value: Optional[str] = None) -> ExistingConfig:
    """
    Detect a configuration left by an earlier run.

    Args:
        path: .env path
        flag_key: Key whose presence marks the configuration as enabled
        flag_value: If given, the key must also have this value

    Returns:
        ExistingConfig (present=False when the file does not exist)
    """
    path = Path(path)
    if not path.exists():
        return ExistingConfig(present=False)

    values = read_env_file(path)
    if flag_value is None:
        enabled = bool(values.get(flag_key))
    else:
        enabled = values.get(flag_key) == flag_value
    return ExistingConfig(present=True, enabled=enabled, values=values)


def _write_private(path: Path, content: str) -> None:
    """
    Replace path atomically with an owner-only file.

    The content goes to a sibling temp file (mkstemp creates it 0600) which
    is fsynced and renamed over path; a failed write leaves path untouched.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding=ENV_ENCODING, errors=ENV_ERRORS) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, ENV_FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class EnvFileWriter:
    """Writes the application .env file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def write(self, content: str, check_unique: bool = True) -> Path:
        """
        Replace the file with content (mode 0600).

        Args:
            content: Full file content
            check_unique: Reject content that defines a key twice

        Raises:
            ValueError: If check_unique and content defines a key more than once
        """
        duplicates = duplicate_keys(content) if check_unique else []
        if duplicates:
            raise ValueError(f"Duplicate keys in environment file content: {', '.join(duplicates)}")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        _write_private(self.path, content)
        logger.debug(f"Wrote {self.path} (mode {oct(ENV_FILE_MODE)})")
        return self.path

    def write_install(self, config: InstallConfig, secrets: Secrets, profile: InstallerProfile) -> Path:
        """Render and write the full install-time .env."""
        return self.write(render_install_env(config, secrets, profile))

    def replace_block(self, patterns: Iterable[re.Pattern], block: List[str]) -> Path:
        """
        Drop every line matching any pattern, then append block.

        The existing file must exist. Surrounding content and comments are
        kept in order.
        """
        patterns = list(patterns)
        kept = [
            line for line in self.path.read_text(encoding=ENV_ENCODING, errors=ENV_ERRORS).splitlines()
            if not any(p.match(line) for p in patterns)
        ]
        while kept and not kept[-1].strip():
            kept.pop()

        block_duplicates = duplicate_keys("\n".join(block))
        if block_duplicates:
            raise ValueError(f"Duplicate keys in block: {', '.join(block_duplicates)}")

        # Operator edits outside the block are kept as-is, duplicates included
        content = "\n".join(kept + [""] + block) + "\n"
        return self.write(content, check_unique=False)

    def apply_oidc(self, config: OIDCConfig) -> Path:
        """Replace any OIDC block (and DISALLOW_LOGIN_FORM) with config."""
        return self.replace_block(OIDC_LINE_PATTERNS, render_oidc_block(config))
