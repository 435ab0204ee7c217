# Path and File Name : /home/kutt/kutt-installer/kutt_installer/models.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: In-memory configuration records passed between installer components

"""
Configuration records.

These live only for the duration of a run. The rendered .env file is the
only persisted form.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class DeployMode(Enum):
    """How the application process is run."""
    CONTAINER = "docker"
    NATIVE = "native"

    @property
    def label(self) -> str:
        return "Docker" if self is DeployMode.CONTAINER else "Native Node.js"


class DbBackend(Enum):
    """Database engine; value is the DB_CLIENT marker written to .env."""
    SQLITE = "better-sqlite3"
    POSTGRES = "pg"

    @property
    def label(self) -> str:
        return "SQLite" if self is DbBackend.SQLITE else "PostgreSQL"


@dataclass
class MailSettings:
    """SMTP settings, present only when mail is enabled."""
    host: str
    port: int
    user: str
    password: str
    from_address: str

    @property
    def secure(self) -> bool:
        return self.port == 465


@dataclass
class InstallConfig:
    """Everything the operator decided for one install run."""
    domain: str
    email: str
    deploy_mode: DeployMode = DeployMode.CONTAINER
    db_backend: DbBackend = DbBackend.SQLITE
    mail: Optional[MailSettings] = None
    allow_registration: bool = False
    allow_anonymous_links: bool = False
    # True when native mode overrode the backend choice
    db_backend_forced: bool = False

    def __post_init__(self):
        self.domain = self.domain.strip().rstrip('/')
        if self.deploy_mode is DeployMode.NATIVE and self.db_backend is not DbBackend.SQLITE:
            self.db_backend = DbBackend.SQLITE
            self.db_backend_forced = True

    @property
    def mail_enabled(self) -> bool:
        return self.mail is not None


@dataclass(frozen=True)
class Secrets:
    """Per-run random secrets. Never logged."""
    jwt_secret: str = field(repr=False)
    db_password: str = field(repr=False)


@dataclass
class OIDCConfig:
    """OpenID Connect provider settings appended to .env."""
    issuer: str
    client_id: str
    client_secret: str = field(repr=False)
    scope: str = "openid profile email"
    email_claim: str = "email"
    disallow_login_form: bool = False

    def __post_init__(self):
        self.issuer = self.issuer.strip().rstrip('/')


@dataclass
class ExistingConfig:
    """Result of reading a possibly existing .env before a run."""
    present: bool
    enabled: bool = False
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        return self.values.get(key, default)
