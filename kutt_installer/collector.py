# Path and File Name : /home/kutt/kutt-installer/kutt_installer/collector.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Parameter collection - prompts the operator for install and OIDC settings, applies defaults, rejects blank required fields

"""
Parameter Collector.

Builds InstallConfig and OIDCConfig records from operator answers. Required
fields raise InputValidationError on blank input; nothing on disk is touched
here, so an abort during collection leaves the host unchanged.
"""

import logging

from .errors import OperationCancelled
from .models import DbBackend, DeployMode, InstallConfig, MailSettings, OIDCConfig
from .profile import InstallerProfile
from .prompts import Prompter

logger = logging.getLogger(__name__)

DEFAULT_MAIL_PORT = 587
DEFAULT_OIDC_SCOPE = "openid profile email"
DEFAULT_OIDC_EMAIL_CLAIM = "email"

OIDC_ISSUER_HINTS = [
    ("Keycloak", "https://keycloak.example.com/realms/your-realm"),
    ("Authentik", "https://auth.example.com/application/o/your-app/"),
    ("Authelia", "https://auth.example.com"),
    ("Google", "https://accounts.google.com"),
    ("Microsoft", "https://login.microsoftonline.com/{tenant-id}/v2.0"),
    ("Okta", "https://your-org.okta.com"),
]


def _collect_mail(prompter: Prompter, domain: str) -> MailSettings:
    host = prompter.ask("  SMTP host")
    raw_port = prompter.ask(f"  SMTP port (default {DEFAULT_MAIL_PORT})", default=str(DEFAULT_MAIL_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        logger.warning(f"Invalid SMTP port '{raw_port}', using {DEFAULT_MAIL_PORT}")
        port = DEFAULT_MAIL_PORT
    user = prompter.ask("  SMTP user")
    password = prompter.ask_secret("  SMTP password")
    default_from = f"noreply@{domain}"
    from_address = prompter.ask(f"  From address (e.g. {default_from})", default=default_from)
    return MailSettings(host=host, port=port, user=user, password=password, from_address=from_address)


def collect_install_config(prompter: Prompter) -> InstallConfig:
    """
    Prompt for every install parameter.

    Returns:
        InstallConfig

    Raises:
        InputValidationError: If domain or email is left blank
    """
    domain = prompter.ask_required("Enter your domain name (e.g. s.example.com)",
                                   "Domain is required.")
    email = prompter.ask_required("Enter your email (for Let's Encrypt notifications)",
                                  "Email is required for Let's Encrypt.")

    prompter.say()
    mode_choice = prompter.choose("Deployment mode:", ["Docker (recommended)", "Native Node.js"])
    deploy_mode = DeployMode.CONTAINER if mode_choice == 1 else DeployMode.NATIVE

    prompter.say()
    if deploy_mode is DeployMode.CONTAINER:
        db_choice = prompter.choose("Database backend:", [
            "SQLite (simplest, good for small-medium usage)",
            "PostgreSQL (recommended for production)",
        ])
        db_backend = DbBackend.SQLITE if db_choice == 1 else DbBackend.POSTGRES
    else:
        db_backend = DbBackend.SQLITE
        prompter.say("Database backend: SQLite (default for native mode)")
        prompter.say("  (Edit .env after install to switch to PostgreSQL/MySQL)")

    prompter.say()
    mail = None
    if prompter.confirm("Enable email (for signup, password reset)?", default=False):
        mail = _collect_mail(prompter, domain.rstrip('/'))

    prompter.say()
    allow_registration = prompter.confirm("Allow public registration?", default=False)
    allow_anonymous_links = prompter.confirm("Allow anonymous link creation?", default=False)

    config = InstallConfig(
        domain=domain,
        email=email,
        deploy_mode=deploy_mode,
        db_backend=db_backend,
        mail=mail,
        allow_registration=allow_registration,
        allow_anonymous_links=allow_anonymous_links,
    )
    if config.db_backend_forced:
        logger.warning("Native mode supports SQLite only; database backend forced to SQLite")
    return config


def confirm_install(prompter: Prompter, config: InstallConfig, profile: InstallerProfile) -> None:
    """
    Show the configuration summary and ask for the go-ahead.

    Raises:
        OperationCancelled: If the operator declines (exit code 1)
    """
    database = config.db_backend.label
    if config.db_backend_forced:
        database += " (forced for native mode)"

    prompter.say()
    logger.info("Configuration summary:")
    prompter.say(f"  Domain:       {config.domain}")
    prompter.say(f"  Email:        {config.email}")
    prompter.say(f"  Deploy mode:  {config.deploy_mode.label}")
    prompter.say(f"  Database:     {database}")
    prompter.say(f"  Mail:         {'Enabled' if config.mail_enabled else 'Disabled'}")
    prompter.say(f"  Registration: {'Allowed' if config.allow_registration else 'Disabled'}")
    prompter.say(f"  Install dir:  {profile.install_dir}")
    prompter.say()
    if not prompter.confirm("Proceed with installation?", default=True):
        raise OperationCancelled("Installation cancelled.", exit_code=1)


def collect_oidc_config(prompter: Prompter) -> OIDCConfig:
    """
    Prompt for OIDC provider settings.

    Returns:
        OIDCConfig with the issuer's trailing slash stripped

    Raises:
        InputValidationError: If issuer, client id or client secret is blank
    """
    prompter.say("Common OIDC issuer URLs:")
    for provider, url in OIDC_ISSUER_HINTS:
        prompter.say(f"  {provider + ':':<12} {url}")
    prompter.say()

    issuer = prompter.ask_required("OIDC Issuer URL", "Issuer URL is required.")
    client_id = prompter.ask_required("OIDC Client ID", "Client ID is required.")
    client_secret = prompter.ask_required("OIDC Client Secret", "Client Secret is required.", secret=True)
    scope = prompter.ask(f"OIDC Scopes (default: {DEFAULT_OIDC_SCOPE})", default=DEFAULT_OIDC_SCOPE)
    email_claim = prompter.ask(f"Email claim field name (default: {DEFAULT_OIDC_EMAIL_CLAIM})",
                               default=DEFAULT_OIDC_EMAIL_CLAIM)

    prompter.say()
    login_choice = prompter.choose("Login form options:", [
        "Keep email/password login alongside OIDC",
        "Disable email/password login (OIDC only)",
    ])

    return OIDCConfig(
        issuer=issuer,
        client_id=client_id,
        client_secret=client_secret,
        scope=scope,
        email_claim=email_claim,
        disallow_login_form=(login_choice == 2),
    )


def confirm_oidc(prompter: Prompter, config: OIDCConfig) -> None:
    """
    Show the OIDC summary (secret masked) and ask for the go-ahead.

    Raises:
        OperationCancelled: If the operator declines (exit code 1)
    """
    prompter.say()
    logger.info("Configuration summary:")
    prompter.say(f"  Issuer:        {config.issuer}")
    prompter.say(f"  Client ID:     {config.client_id}")
    prompter.say("  Client Secret: ********")
    prompter.say(f"  Scopes:        {config.scope}")
    prompter.say(f"  Email claim:   {config.email_claim}")
    login_form = "Disabled (OIDC only)" if config.disallow_login_form else "Enabled"
    prompter.say(f"  Login form:    {login_form}")
    prompter.say()
    if not prompter.confirm("Apply this configuration?", default=True):
        raise OperationCancelled("Configuration cancelled.", exit_code=1)
